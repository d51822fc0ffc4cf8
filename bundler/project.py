"""
Project context.

A Project bundles the project directory, its resolved configuration and its
rules. It is passed explicitly to file discovery, the result writer and the
orchestrator instead of being read from process-wide state.
"""

import logging
import os
import posixpath
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from bundler.config.manager import ConfigurationManager
from bundler.config.schema import BundlerConfig
from bundler.rules.loaders import LoaderRegistry
from bundler.rules.rules import Rules


logger = logging.getLogger(__name__)


def _normalize_project_path(path: str) -> str:
    """Project-relative POSIX path without leading `./` or trailing `/`."""
    return posixpath.normpath(path.replace("\\", "/"))


class Project:
    """A front-end project being bundled.
    
    Attributes:
        dir: Absolute project directory
        config: Resolved bundler configuration
        rules: Loader chain resolver for the project's files
    """
    
    def __init__(
        self,
        project_dir: Union[str, Path],
        config: Optional[BundlerConfig] = None,
        registry: Optional[LoaderRegistry] = None,
    ):
        self.dir = os.path.abspath(project_dir)
        self.config = config or BundlerConfig()
        self.rules = Rules(self.dir, self.config.rules, registry=registry)
        self._sources = [_normalize_project_path(s) for s in self.config.sources]
    
    @classmethod
    def load(
        cls,
        project_dir: Union[str, Path],
        config_file: Optional[str] = None,
        cli_overrides: Optional[Dict[str, Any]] = None,
        registry: Optional[LoaderRegistry] = None,
    ) -> "Project":
        """Load a project and its layered configuration.
        
        Raises:
            ConfigurationError: If the configuration or its rules are invalid
        """
        config = ConfigurationManager().load_configuration(
            project_dir, config_file=config_file, cli_overrides=cli_overrides
        )
        project = cls(project_dir, config, registry=registry)
        logger.debug(
            f"Loaded project {project.dir} (sources={project.sources}, "
            f"output={project.build_dir}, rules={len(project.rules)})"
        )
        return project
    
    @property
    def sources(self) -> List[str]:
        """Project-relative POSIX source directories of the root package."""
        return list(self._sources)
    
    @property
    def build_dir(self) -> str:
        """Build directory as a POSIX path relative to the project."""
        output = self.config.output
        if os.path.isabs(output):
            output = os.path.relpath(output, self.dir)
        return _normalize_project_path(output)
    
    @property
    def max_parallel_files(self) -> int:
        return self.config.max_parallel_files
    
    def absolute(self, prj_path: str) -> str:
        """Absolute native path of a project-relative POSIX path."""
        return os.path.normpath(os.path.join(self.dir, *prj_path.split("/")))
