"""
Bundler Error Hierarchy

Defines all custom exceptions used by the bundler engine.

Error Categories:
- Configuration Errors: malformed config files, unresolvable loaders
- Package Errors: unreadable or missing package.json descriptors
- Execution Errors: a rule loader raised while transforming a file

File system errors (permissions, disk full, missing paths) are not wrapped
and surface to the caller as the original OSError.
"""

from dataclasses import dataclass, field
from typing import Optional, Dict, Any, List


class BundlerError(Exception):
    """Base exception for all bundler errors."""
    pass


class ConfigurationError(BundlerError):
    """Error in project or bundler configuration.
    
    Attributes:
        config_path: Configuration file involved (if any)
        errors: Individual validation messages
    """
    
    def __init__(
        self,
        message: str,
        config_path: Optional[str] = None,
        errors: Optional[List[str]] = None,
    ):
        super().__init__(message)
        self.config_path = config_path
        self.errors = errors or []


class LoaderResolutionError(ConfigurationError):
    """A loader named in a rule could not be resolved to a callable.
    
    Attributes:
        loader: The `use` identifier that failed to resolve
    """
    
    def __init__(self, message: str, loader: Optional[str] = None):
        super().__init__(message)
        self.loader = loader


class PackageResolutionError(BundlerError):
    """A package descriptor could not be built.
    
    Attributes:
        package_name: Name of the package being resolved
        package_path: Directory that was searched
    """
    
    def __init__(
        self,
        message: str,
        package_name: Optional[str] = None,
        package_path: Optional[str] = None,
    ):
        super().__init__(message)
        self.package_name = package_name
        self.package_path = package_path


class LoaderExecutionError(BundlerError):
    """A rule loader raised (or its awaitable failed) while processing a file.
    
    The message is always `Loader '<use>' failed: <original message>`.
    
    Attributes:
        loader: The failing loader's `use` identifier
        file_path: Project-relative path of the file being processed
        original_error: The exception raised by the loader
    """
    
    def __init__(
        self,
        message: str,
        loader: Optional[str] = None,
        file_path: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        super().__init__(message)
        self.loader = loader
        self.file_path = file_path
        self.original_error = original_error


@dataclass
class BundlerErrorInfo:
    """Structured error information for user-friendly error reporting.
    
    Attributes:
        error_type: Type of error (e.g., "LoaderExecutionError")
        message: Human-readable error message
        details: Additional context (file path, loader, etc.)
        suggestion: Suggested action for the user
    """
    error_type: str
    message: str
    details: Dict[str, Any] = field(default_factory=dict)
    suggestion: str = ""
    
    @classmethod
    def from_exception(cls, error: Exception) -> "BundlerErrorInfo":
        """Create BundlerErrorInfo from an exception.
        
        Args:
            error: Exception to convert
            
        Returns:
            BundlerErrorInfo with details extracted from the exception
        """
        details: Dict[str, Any] = {}
        suggestion = ""
        
        if isinstance(error, LoaderExecutionError):
            if error.loader:
                details["loader"] = error.loader
            if error.file_path:
                details["file_path"] = error.file_path
            if error.original_error is not None:
                details["original_error"] = type(error.original_error).__name__
            suggestion = "Fix the failing loader or exclude the file from its rule."
        
        elif isinstance(error, LoaderResolutionError):
            if error.loader:
                details["loader"] = error.loader
            suggestion = (
                "Use a built-in loader name, an installed 'bundle_pipeline.loaders' "
                "entry point, or a 'module:attribute' import path."
            )
        
        elif isinstance(error, ConfigurationError):
            if error.config_path:
                details["config_path"] = error.config_path
            if error.errors:
                details["errors"] = error.errors
            suggestion = "Check the .npmbundlerrc file and command line options."
        
        elif isinstance(error, PackageResolutionError):
            if error.package_name:
                details["package_name"] = error.package_name
            if error.package_path:
                details["package_path"] = error.package_path
            suggestion = "Run your package manager install before bundling."
        
        elif isinstance(error, OSError):
            if error.filename:
                details["path"] = str(error.filename)
            suggestion = "Check file permissions and available disk space."
        
        return cls(
            error_type=type(error).__name__,
            message=str(error),
            details=details,
            suggestion=suggestion,
        )
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "error_type": self.error_type,
            "message": self.message,
            "details": self.details,
            "suggestion": self.suggestion,
        }
