"""
Loader descriptors and the loader registry.

A loader is any callable `exec(context, options)` returning new content,
an awaitable resolving to new content, or None to leave content unchanged.
Loaders are looked up by the `use` identifier configured in a rule:

1. Built-in loaders registered with `LoaderRegistry.register`
2. Installed plugins exposing a `bundle_pipeline.loaders` entry point
3. A `package.module:attribute` import path
"""

import importlib
import logging
from dataclasses import dataclass, field
from importlib.metadata import entry_points
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional, Union

from bundler.errors import LoaderResolutionError


logger = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "bundle_pipeline.loaders"

LoaderResult = Union[Optional[str], Awaitable[Optional[str]]]
LoaderCallable = Callable[[Any, Dict[str, Any]], LoaderResult]


@dataclass(frozen=True)
class LoaderDescriptor:
    """One configured transform step of a file's loader chain.
    
    Attributes:
        use: Human-readable identifier of the loader
        exec: The transform callable
        options: Opaque options passed to the loader on every call
    """
    use: str
    exec: LoaderCallable
    options: Mapping[str, Any] = field(default_factory=dict)
    
    def invoke(self, context: Any) -> LoaderResult:
        """Run the loader against a context with its configured options."""
        return self.exec(context, dict(self.options))


class LoaderRegistry:
    """Resolves `use` identifiers to loader callables.
    
    Usage:
        @LoaderRegistry.register("copy-loader")
        def copy_loader(context, options):
            return context.content
    """
    
    # Built-in loaders by name
    _builtins: Dict[str, LoaderCallable] = {}
    
    def __init__(self, extra_loaders: Optional[Dict[str, LoaderCallable]] = None):
        """Initialize the registry.
        
        Args:
            extra_loaders: Loaders available to this registry only (take
                precedence over built-ins)
        """
        self._extra: Dict[str, LoaderCallable] = dict(extra_loaders or {})
        self._cache: Dict[str, LoaderCallable] = {}
    
    @classmethod
    def register(cls, name: str):
        """Decorator to register a built-in loader.
        
        Args:
            name: The `use` identifier the loader answers to
        """
        def decorator(loader: LoaderCallable) -> LoaderCallable:
            cls._builtins[name] = loader
            return loader
        return decorator
    
    @classmethod
    def get_builtin_names(cls) -> list[str]:
        return sorted(cls._builtins.keys())
    
    def resolve(self, use: str) -> LoaderCallable:
        """Resolve a loader identifier to a callable.
        
        Resolved loaders are cached per registry.
        
        Raises:
            LoaderResolutionError: If the identifier cannot be resolved
        """
        if use in self._cache:
            return self._cache[use]
        
        loader = self._extra.get(use) or self._builtins.get(use)
        if loader is None:
            loader = self._load_entry_point(use)
        if loader is None and ":" in use:
            loader = self._import_path(use)
        if loader is None:
            raise LoaderResolutionError(
                f"Cannot resolve loader '{use}'. "
                f"Built-in loaders: {', '.join(self.get_builtin_names())}",
                loader=use,
            )
        if not callable(loader):
            raise LoaderResolutionError(f"Loader '{use}' is not callable", loader=use)
        
        self._cache[use] = loader
        return loader
    
    def _load_entry_point(self, use: str) -> Optional[LoaderCallable]:
        matches = [ep for ep in entry_points(group=ENTRY_POINT_GROUP) if ep.name == use]
        if not matches:
            return None
        logger.debug(f"Loading loader '{use}' from entry point {matches[0].value}")
        try:
            return matches[0].load()
        except Exception as e:
            raise LoaderResolutionError(f"Failed to load loader '{use}': {e}", loader=use) from e
    
    def _import_path(self, use: str) -> LoaderCallable:
        module_name, _, attribute = use.partition(":")
        try:
            module = importlib.import_module(module_name)
        except ImportError as e:
            raise LoaderResolutionError(
                f"Cannot import module '{module_name}' for loader '{use}': {e}",
                loader=use,
            ) from e
        
        target: Any = module
        for part in attribute.split("."):
            try:
                target = getattr(target, part)
            except AttributeError as e:
                raise LoaderResolutionError(
                    f"Module '{module_name}' has no attribute '{attribute}'",
                    loader=use,
                ) from e
        return target


def register_builtin_loaders() -> None:
    """Import built-in loader modules to trigger their registration."""
    from bundler.rules import builtin  # noqa: F401
