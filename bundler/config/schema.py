"""
Configuration schema and data models for the bundler.

This module defines the configuration data structures read from a
project's `.npmbundlerrc` file:
- Source directories of the root package
- Output (build) directory
- Rule definitions mapping files to loader chains
- Concurrency limits for file processing
- Logging and report settings
"""

from dataclasses import dataclass, field
from typing import Optional, Dict, Any, List
from enum import Enum


DEFAULT_MAX_PARALLEL_FILES = 128
DEFAULT_OUTPUT_DIR = "./build"
DEFAULT_REPORT_FILE = "bundle-pipeline-report.json"


class LogLevel(Enum):
    """Supported logging levels."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass
class BundlerConfig:
    """Complete bundler configuration.
    
    Attributes:
        sources: Root package directories holding source files
        output: Build directory, relative to the project directory
        max_parallel_files: Maximum number of files processed concurrently
        rules: Raw rule entries (validated by bundler.rules)
        log_level: Logging level
        log_file: Optional log file path
        dump_report: Whether to write a JSON build report
        report_file: Report file name, relative to the build directory
    """
    sources: List[str] = field(default_factory=list)
    output: str = DEFAULT_OUTPUT_DIR
    max_parallel_files: int = DEFAULT_MAX_PARALLEL_FILES
    rules: List[Dict[str, Any]] = field(default_factory=list)
    log_level: str = LogLevel.INFO.value
    log_file: Optional[str] = None
    dump_report: bool = False
    report_file: str = DEFAULT_REPORT_FILE
    
    def validate(self) -> List[str]:
        """Validate configuration and return list of errors."""
        errors = []
        
        if not isinstance(self.sources, list) or not all(isinstance(s, str) for s in self.sources):
            errors.append("sources must be a list of directory paths")
        
        if not isinstance(self.output, str) or not self.output.strip():
            errors.append("output must be a non-empty directory path")
        
        if isinstance(self.max_parallel_files, bool) or not isinstance(self.max_parallel_files, int):
            errors.append("max_parallel_files must be an integer")
        elif self.max_parallel_files < 1:
            errors.append("max_parallel_files must be at least 1")
        
        if not isinstance(self.rules, list):
            errors.append("rules must be a list")
        
        try:
            LogLevel(str(self.log_level).lower())
        except ValueError:
            valid_levels = [l.value for l in LogLevel]
            errors.append(f"Invalid log_level '{self.log_level}'. Valid options: {valid_levels}")
        
        return errors
