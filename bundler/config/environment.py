"""
Environment variable integration for the bundler configuration.

Centralizes the environment variable names that override `.npmbundlerrc`
values and converts them into configuration overrides.
"""

import os
from typing import Dict, Any, List, Tuple


class EnvironmentVariables:
    """Centralized environment variable definitions and utilities."""
    
    OUTPUT_DIR = "BUNDLER_OUTPUT_DIR"
    MAX_PARALLEL_FILES = "BUNDLER_MAX_PARALLEL_FILES"
    LOG_LEVEL = "BUNDLER_LOG_LEVEL"
    
    @classmethod
    def get_all_variables(cls) -> List[str]:
        """Get list of all supported environment variables."""
        return [
            cls.OUTPUT_DIR,
            cls.MAX_PARALLEL_FILES,
            cls.LOG_LEVEL,
        ]
    
    @classmethod
    def get_variable_documentation(cls) -> Dict[str, str]:
        """Get documentation for all environment variables."""
        return {
            cls.OUTPUT_DIR: "Build directory relative to the project (default: ./build)",
            cls.MAX_PARALLEL_FILES: "Maximum number of files processed concurrently (default: 128)",
            cls.LOG_LEVEL: "Default logging level (debug, info, warning, error)",
        }
    
    @classmethod
    def load_overrides(cls) -> Tuple[Dict[str, Any], List[str]]:
        """
        Read configuration overrides from the environment.
        
        Returns:
            Tuple of (overrides, errors) - errors for values that cannot be parsed
        """
        overrides: Dict[str, Any] = {}
        errors: List[str] = []
        
        if cls.OUTPUT_DIR in os.environ:
            overrides['output'] = os.environ[cls.OUTPUT_DIR]
        
        if cls.MAX_PARALLEL_FILES in os.environ:
            raw = os.environ[cls.MAX_PARALLEL_FILES]
            try:
                overrides['max_parallel_files'] = int(raw)
            except ValueError:
                errors.append(f"Invalid {cls.MAX_PARALLEL_FILES}: '{raw}'. Must be an integer")
        
        if cls.LOG_LEVEL in os.environ:
            overrides['log_level'] = os.environ[cls.LOG_LEVEL].lower()
        
        return overrides, errors
