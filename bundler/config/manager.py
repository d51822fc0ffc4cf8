"""
Configuration Manager for the bundler.

This module handles loading, validation, and merging of configuration from multiple sources:
- System defaults
- Project configuration (<project>/.npmbundlerrc)
- Explicit configuration (--config file)
- Environment variables
- CLI arguments (highest precedence)
"""

import logging
import os
import re
from dataclasses import asdict, fields
from pathlib import Path
from typing import Optional, Dict, Any, Union

from bundler.errors import ConfigurationError
from .schema import BundlerConfig
from .environment import EnvironmentVariables
from .yaml_parser import ConfigurationYAMLParser, YAMLParsingError, IGNORED_KEYS


logger = logging.getLogger(__name__)

PROJECT_CONFIG_FILE = ".npmbundlerrc"


class ConfigurationManager:
    """Manages configuration loading, validation, and environment variable integration."""
    
    def __init__(self):
        self.yaml_parser = ConfigurationYAMLParser()
    
    def load_configuration(self,
                           project_dir: Union[str, Path],
                           config_file: Optional[str] = None,
                           cli_overrides: Optional[Dict[str, Any]] = None) -> BundlerConfig:
        """
        Load configuration from all sources with proper precedence.
        
        Precedence order (highest to lowest):
        1. CLI arguments (cli_overrides)
        2. Environment variables
        3. Explicit config file (--config, relative to the project directory)
        4. Project config (<project>/.npmbundlerrc)
        5. System defaults
        
        Args:
            project_dir: Project directory
            config_file: Optional explicit configuration file path
            cli_overrides: Dictionary of CLI argument overrides
            
        Returns:
            BundlerConfig: Merged and validated configuration
            
        Raises:
            ConfigurationError: If configuration files contain invalid YAML or values
        """
        project_dir = Path(project_dir)
        config_dict = asdict(BundlerConfig())
        
        project_config_path = project_dir / PROJECT_CONFIG_FILE
        if project_config_path.exists():
            logger.debug(f"Loading project configuration from {project_config_path}")
            config_dict = self._merge_configs(config_dict, self._load_yaml_file(project_config_path))
        
        if config_file:
            explicit_path = Path(config_file)
            if not explicit_path.is_absolute():
                explicit_path = project_dir / explicit_path
            logger.debug(f"Loading configuration from {explicit_path}")
            config_dict = self._merge_configs(config_dict, self._load_yaml_file(explicit_path))
        
        env_overrides, env_errors = EnvironmentVariables.load_overrides()
        if env_errors:
            raise ConfigurationError("Invalid environment configuration", errors=env_errors)
        config_dict = self._merge_configs(config_dict, env_overrides)
        
        if cli_overrides:
            overrides = {k: v for k, v in cli_overrides.items() if v is not None}
            config_dict = self._merge_configs(config_dict, overrides)
        
        config_dict = self.substitute_environment_variables(config_dict)
        
        config = self._dict_to_config(config_dict)
        errors = config.validate()
        if errors:
            raise ConfigurationError(
                "Invalid bundler configuration:\n" + "\n".join(f"  - {e}" for e in errors),
                config_path=str(config_file) if config_file else None,
                errors=errors,
            )
        
        return config
    
    def substitute_environment_variables(self, config_dict: Dict[str, Any]) -> Dict[str, Any]:
        """
        Substitute ${VAR} and ${VAR:-default} syntax with environment variable values.
        
        Raises:
            ConfigurationError: If required environment variable is missing
        """
        def substitute_value(value):
            if not isinstance(value, str):
                return value
            
            pattern = r'\$\{([^}]+)\}'
            
            def replace_var(match):
                var_expr = match.group(1)
                
                if ':-' in var_expr:
                    var_name, default_value = var_expr.split(':-', 1)
                    return os.environ.get(var_name, default_value)
                
                if var_expr not in os.environ:
                    raise ConfigurationError(f"Required environment variable '{var_expr}' is not set")
                return os.environ[var_expr]
            
            return re.sub(pattern, replace_var, value)
        
        def substitute_recursive(obj):
            if isinstance(obj, dict):
                return {k: substitute_recursive(v) for k, v in obj.items()}
            elif isinstance(obj, list):
                return [substitute_recursive(item) for item in obj]
            else:
                return substitute_value(obj)
        
        return substitute_recursive(config_dict)
    
    def _load_yaml_file(self, file_path: Path) -> Dict[str, Any]:
        """Load and parse a configuration file with enhanced error reporting."""
        try:
            config_dict, validation_errors = self.yaml_parser.validate_and_parse_file(file_path)
        except YAMLParsingError as e:
            raise ConfigurationError(str(e), config_path=str(file_path)) from e
        
        if validation_errors:
            raise ConfigurationError(
                f"Configuration validation errors in {file_path}:\n" +
                "\n".join(f"  - {error}" for error in validation_errors),
                config_path=str(file_path),
                errors=validation_errors,
            )
        
        return config_dict
    
    def _merge_configs(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Recursively merge configuration dictionaries."""
        result = base.copy()
        
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge_configs(result[key], value)
            else:
                result[key] = value
        
        return result
    
    def _dict_to_config(self, config_dict: Dict[str, Any]) -> BundlerConfig:
        """Convert configuration dictionary to BundlerConfig object."""
        known = {f.name for f in fields(BundlerConfig)}
        ignored = sorted(k for k in config_dict if k in IGNORED_KEYS)
        if ignored:
            logger.debug(f"Ignoring configuration keys handled by other steps: {', '.join(ignored)}")
        return BundlerConfig(**{k: v for k, v in config_dict.items() if k in known})
