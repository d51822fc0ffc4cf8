"""
Rule execution engine: file discovery, loader pipeline, result writer,
bounded parallel runner and package orchestrator.
"""

from bundler.engine.chunks import run_in_chunks
from bundler.engine.context import FileContext, LogMessage, PluginLogger
from bundler.engine.discovery import find_files, find_package_files
from bundler.engine.orchestrator import RulesOrchestrator, RulesRunResult
from bundler.engine.report import Report
from bundler.engine.runner import run_loaders
from bundler.engine.writer import ResultWriter, WriteResult, strip_source_dir

__all__ = [
    "FileContext",
    "LogMessage",
    "PluginLogger",
    "Report",
    "ResultWriter",
    "RulesOrchestrator",
    "RulesRunResult",
    "WriteResult",
    "find_files",
    "find_package_files",
    "run_in_chunks",
    "run_loaders",
    "strip_source_dir",
]
