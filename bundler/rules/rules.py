"""
Rule configuration and per-file loader chain resolution.

A rule selects files by regular expressions matched against the
project-relative POSIX path and names the loaders applied to them:

    rules:
      - test: '\\.json$'
        exclude: '^src/fixtures/'
        use:
          - json-loader
      - test: '\\.css$'
        use:
          - loader: style-loader
            options: {extension: ".js"}

The chain for a file is the concatenation of the `use` lists of every
matching rule, in rule order.
"""

import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from bundler.errors import ConfigurationError
from bundler.rules.loaders import LoaderDescriptor, LoaderRegistry, register_builtin_loaders


logger = logging.getLogger(__name__)


class LoaderSpec(BaseModel):
    """A loader reference inside a rule's `use` list."""
    model_config = ConfigDict(extra="forbid")
    
    loader: str = Field(..., min_length=1, description="Loader identifier")
    options: Dict[str, Any] = Field(default_factory=dict, description="Options passed to the loader")


class RuleConfig(BaseModel):
    """A single rule entry from the bundler configuration.
    
    Attributes:
        test: Regular expression(s); at least one must match the file path
        include: Optional regular expression(s); one must match when given
        exclude: Optional regular expression(s); none may match
        use: Loaders applied to matching files, in order
    """
    model_config = ConfigDict(extra="forbid")
    
    test: List[str] = Field(..., min_length=1)
    include: Optional[List[str]] = None
    exclude: Optional[List[str]] = None
    use: List[LoaderSpec] = Field(default_factory=list)
    
    @field_validator("test", "include", "exclude", mode="before")
    @classmethod
    def _as_pattern_list(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [value]
        return value
    
    @field_validator("test", "include", "exclude")
    @classmethod
    def _check_patterns(cls, value: Optional[List[str]]) -> Optional[List[str]]:
        for pattern in value or []:
            try:
                re.compile(pattern)
            except re.error as e:
                raise ValueError(f"invalid regular expression '{pattern}': {e}")
        return value
    
    @field_validator("use", mode="before")
    @classmethod
    def _normalize_use(cls, value: Any) -> Any:
        if isinstance(value, (str, dict)):
            value = [value]
        if isinstance(value, list):
            return [{"loader": item} if isinstance(item, str) else item for item in value]
        return value


class _CompiledRule:
    def __init__(self, config: RuleConfig):
        self.config = config
        self.test = [re.compile(p) for p in config.test]
        self.include = [re.compile(p) for p in config.include] if config.include else None
        self.exclude = [re.compile(p) for p in config.exclude] if config.exclude else []
    
    def applies(self, prj_rel_path: str) -> bool:
        if not any(p.search(prj_rel_path) for p in self.test):
            return False
        if self.include is not None and not any(p.search(prj_rel_path) for p in self.include):
            return False
        return not any(p.search(prj_rel_path) for p in self.exclude)


def parse_rules(raw_rules: List[Dict[str, Any]]) -> List[RuleConfig]:
    """Validate raw rule dictionaries.
    
    Raises:
        ConfigurationError: If any rule is malformed
    """
    parsed = []
    errors = []
    
    for index, raw in enumerate(raw_rules or []):
        try:
            parsed.append(RuleConfig.model_validate(raw))
        except ValidationError as e:
            for err in e.errors():
                location = ".".join(str(part) for part in err["loc"])
                errors.append(f"rules[{index}].{location}: {err['msg']}")
    
    if errors:
        raise ConfigurationError(
            "Invalid rule configuration:\n" + "\n".join(f"  - {e}" for e in errors),
            errors=errors,
        )
    
    return parsed


class Rules:
    """Resolves the loader chain configured for each project file.
    
    Example:
        >>> rules = Rules("/work/app", [{"test": "\\\\.json$", "use": ["json-loader"]}])
        >>> [l.use for l in rules.loaders_for_file("/work/app/src/data.json")]
        ['json-loader']
    """
    
    def __init__(
        self,
        project_dir: Union[str, Path],
        raw_rules: Optional[List[Dict[str, Any]]] = None,
        registry: Optional[LoaderRegistry] = None,
    ):
        """Initialize rules.
        
        Loader names are resolved eagerly so misconfiguration is reported
        before any file is processed.
        
        Args:
            project_dir: Absolute project directory
            raw_rules: Rule entries as read from configuration
            registry: Loader registry (a default one is created if not provided)
        
        Raises:
            ConfigurationError: If a rule is malformed or a loader cannot be resolved
        """
        register_builtin_loaders()
        
        self._project_dir = Path(os.path.abspath(project_dir))
        self._registry = registry or LoaderRegistry()
        self._rules = [_CompiledRule(config) for config in parse_rules(raw_rules or [])]
        
        for rule in self._rules:
            for spec in rule.config.use:
                self._registry.resolve(spec.loader)
        
        logger.debug(f"Loaded {len(self._rules)} rule(s)")
    
    def __len__(self) -> int:
        return len(self._rules)
    
    def loaders_for_file(self, file_path: Union[str, Path]) -> List[LoaderDescriptor]:
        """Get the ordered loader chain for a file.
        
        Args:
            file_path: Absolute path of the file
            
        Returns:
            Loader descriptors, possibly empty
        """
        prj_rel_path = self._project_relative(file_path)
        
        loaders: List[LoaderDescriptor] = []
        for rule in self._rules:
            if not rule.applies(prj_rel_path):
                continue
            for spec in rule.config.use:
                loaders.append(LoaderDescriptor(
                    use=spec.loader,
                    exec=self._registry.resolve(spec.loader),
                    options=dict(spec.options),
                ))
        
        return loaders
    
    def _project_relative(self, file_path: Union[str, Path]) -> str:
        path = Path(os.path.abspath(file_path))
        try:
            return path.relative_to(self._project_dir).as_posix()
        except ValueError:
            return path.as_posix()
