"""
Loader pipeline.

Runs a file's loader chain strictly in order. Each loader receives the
file's context and its own options and may return new content (directly or
as an awaitable) or None to keep the current content. The first failing
loader aborts the chain.
"""

import inspect
import logging
from typing import Optional, Sequence

from bundler.engine.context import FileContext
from bundler.errors import LoaderExecutionError
from bundler.rules.loaders import LoaderDescriptor


logger = logging.getLogger(__name__)


async def run_loaders(
    loaders: Sequence[LoaderDescriptor],
    context: FileContext,
    first_loader_index: int = 0,
) -> Optional[str]:
    """Run loaders starting at a given index.
    
    Args:
        loaders: Ordered loader chain resolved for the file
        context: The file's context, updated in place
        first_loader_index: Index of the first loader to run
        
    Returns:
        The final content of the context
        
    Raises:
        LoaderExecutionError: If a loader raises or its awaitable fails
    """
    for loader in loaders[first_loader_index:]:
        try:
            result = loader.invoke(context)
            if inspect.isawaitable(result):
                result = await result
        except Exception as e:
            raise LoaderExecutionError(
                f"Loader '{loader.use}' failed: {e}",
                loader=loader.use,
                file_path=context.file_path,
                original_error=e,
            ) from e
        
        if result is not None:
            context.content = result
        
        logger.debug(f"Loader '{loader.use}' ran on {context.file_path}")
    
    return context.content
