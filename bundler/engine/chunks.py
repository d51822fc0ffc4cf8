"""
Bounded parallel runner.

Items are partitioned into consecutive chunks of at most `chunk_size`
elements. All operations of a chunk run concurrently and the whole chunk
settles before the next one is dispatched.
"""

import asyncio
import logging
from typing import Awaitable, Callable, List, Sequence, TypeVar


logger = logging.getLogger(__name__)

T = TypeVar("T")


async def run_in_chunks(
    items: Sequence[T],
    chunk_size: int,
    chunk_index: int,
    callback: Callable[[T], Awaitable[object]],
) -> None:
    """Run `callback` over items, at most `chunk_size` at a time.
    
    Every operation of a chunk is allowed to settle. If any of them failed,
    the first failure (in item order) is raised and later chunks are not
    dispatched.
    
    Args:
        items: Items to process, in order
        chunk_size: Maximum number of in-flight operations (>= 1)
        chunk_index: Index of the first chunk to process
        callback: Coroutine function applied to each item
        
    Raises:
        ValueError: If chunk_size is lower than 1
    """
    if chunk_size < 1:
        raise ValueError(f"chunk_size must be at least 1, got {chunk_size}")
    
    chunks_count = (len(items) + chunk_size - 1) // chunk_size
    
    for index in range(chunk_index, chunks_count):
        chunk = items[index * chunk_size:(index + 1) * chunk_size]
        
        results = await asyncio.gather(
            *(callback(item) for item in chunk),
            return_exceptions=True,
        )
        
        failures: List[BaseException] = [r for r in results if isinstance(r, BaseException)]
        if failures:
            if len(failures) > 1:
                logger.debug(f"Chunk {index} had {len(failures)} failures; raising the first one")
            raise failures[0]
