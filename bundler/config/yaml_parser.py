"""
YAML parser with validation for bundler configuration files.

`.npmbundlerrc` files are usually JSON; since JSON is a subset of YAML the
same parser handles both, with line/column information in errors.
"""

import yaml
from pathlib import Path
from typing import Dict, Any, List, Optional, Tuple


# Top-level keys accepted in configuration files (after key normalization)
KNOWN_KEYS = {
    'sources', 'output', 'max_parallel_files', 'rules',
    'log_level', 'log_file', 'dump_report', 'report_file',
}

# Keys belonging to other build steps that are tolerated and ignored
IGNORED_KEYS = {
    'create_jar', 'config', 'packages', 'exclude', 'include_dependencies',
    'ignore', 'process_serially', 'verbose', 'no_tracking', 'webpack',
}


class YAMLParsingError(Exception):
    """Custom exception for YAML parsing errors with enhanced context."""
    
    def __init__(self, message: str, file_path: Optional[Path] = None, 
                 line_number: Optional[int] = None, column: Optional[int] = None):
        self.file_path = file_path
        self.line_number = line_number
        self.column = column
        
        error_parts = [message]
        
        if file_path:
            error_parts.append(f"File: {file_path}")
        
        if line_number is not None:
            if column is not None:
                error_parts.append(f"Line {line_number}, Column {column}")
            else:
                error_parts.append(f"Line {line_number}")
        
        super().__init__(" | ".join(error_parts))


def normalize_key(key: str) -> str:
    """Turn `max-parallel-files` style keys into `max_parallel_files`."""
    return str(key).strip().replace('-', '_')


class ConfigurationYAMLParser:
    """YAML parser for bundler configuration files with validation and error reporting."""
    
    def parse_file(self, file_path: Path) -> Dict[str, Any]:
        """
        Parse a configuration file.
        
        Args:
            file_path: Path to YAML or JSON configuration file
            
        Returns:
            Dictionary containing parsed configuration with normalized keys
            
        Raises:
            YAMLParsingError: If the content is invalid or file cannot be read
        """
        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                content = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise self._to_parsing_error(e, file_path)
        except FileNotFoundError:
            raise YAMLParsingError("Configuration file not found", file_path)
        except PermissionError:
            raise YAMLParsingError("Permission denied reading configuration file", file_path)
        except UnicodeDecodeError as e:
            raise YAMLParsingError(f"File encoding error: {e}", file_path)
        
        return self._normalize_root(content, file_path)
    
    def parse_string(self, yaml_content: str) -> Dict[str, Any]:
        """
        Parse configuration from a string.
        
        Raises:
            YAMLParsingError: If YAML is invalid
        """
        try:
            content = yaml.safe_load(yaml_content)
        except yaml.YAMLError as e:
            raise self._to_parsing_error(e, None)
        
        return self._normalize_root(content, None)
    
    def validate_and_parse_file(self, file_path: Path) -> Tuple[Dict[str, Any], List[str]]:
        """Parse a file and return it together with structural validation errors."""
        config_dict = self.parse_file(file_path)
        return config_dict, self.validate_configuration_structure(config_dict)
    
    def validate_configuration_structure(self, config_dict: Dict[str, Any]) -> List[str]:
        """
        Validate configuration dictionary structure.
        
        Args:
            config_dict: Normalized configuration dictionary
            
        Returns:
            List of validation errors (empty if valid)
        """
        errors = []
        
        unknown_keys = set(config_dict.keys()) - KNOWN_KEYS - IGNORED_KEYS
        if unknown_keys:
            errors.append(f"Unknown configuration keys: {', '.join(sorted(unknown_keys))}")
        
        if 'sources' in config_dict and not isinstance(config_dict['sources'], list):
            errors.append("sources must be a list")
        
        if 'rules' in config_dict:
            rules = config_dict['rules']
            if not isinstance(rules, list):
                errors.append("rules must be a list")
            else:
                for index, rule in enumerate(rules):
                    if not isinstance(rule, dict):
                        errors.append(f"rules[{index}] must be a dictionary")
        
        if 'max_parallel_files' in config_dict:
            value = config_dict['max_parallel_files']
            if isinstance(value, bool) or not isinstance(value, int):
                errors.append("max_parallel_files must be an integer")
        
        return errors
    
    def _normalize_root(self, content: Any, file_path: Optional[Path]) -> Dict[str, Any]:
        if content is None:
            return {}
        if not isinstance(content, dict):
            raise YAMLParsingError("Configuration root must be a mapping", file_path)
        # Only top-level keys are normalized; rule entries keep their own keys
        return {normalize_key(k): v for k, v in content.items()}
    
    def _to_parsing_error(self, e: yaml.YAMLError, file_path: Optional[Path]) -> YAMLParsingError:
        line_number = None
        column = None
        
        if hasattr(e, 'problem_mark') and e.problem_mark:
            line_number = e.problem_mark.line + 1  # YAML uses 0-based line numbers
            column = e.problem_mark.column + 1
        
        if hasattr(e, 'problem') and e.problem:
            message = f"YAML parsing error: {e.problem}"
        else:
            message = f"YAML parsing error: {str(e)}"
        
        return YAMLParsingError(message, file_path, line_number, column)
