"""
Rule configuration and loader resolution.
"""

from bundler.rules.loaders import LoaderDescriptor, LoaderRegistry
from bundler.rules.rules import RuleConfig, Rules, parse_rules

__all__ = [
    "LoaderDescriptor",
    "LoaderRegistry",
    "RuleConfig",
    "Rules",
    "parse_rules",
]
