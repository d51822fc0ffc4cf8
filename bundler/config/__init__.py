"""
Bundler configuration: schema, YAML parsing and layered loading.
"""

from bundler.config.schema import BundlerConfig, LogLevel
from bundler.config.manager import ConfigurationManager

__all__ = [
    "BundlerConfig",
    "ConfigurationManager",
    "LogLevel",
]
