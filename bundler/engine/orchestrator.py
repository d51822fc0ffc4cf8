"""
Rules orchestrator.

Applies configured rules to every dirty package of a build:

1. Skip packages marked clean
2. Discover each package's files and compute its destination descriptor
3. Run resolver -> loader pipeline -> result writer -> report for every file,
   at most `max_parallel_files` files at a time
4. Process distinct packages concurrently

A failing file fails the whole run once every in-flight operation settles.
Output already written is left on disk.
"""

import asyncio
import logging
import os
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from bundler.engine.chunks import run_in_chunks
from bundler.engine.context import FileContext
from bundler.engine.discovery import find_package_files
from bundler.engine.runner import run_loaders
from bundler.engine.writer import ResultWriter
from bundler.errors import ConfigurationError
from bundler.packages import PackageDescriptor, get_dest_dir
from bundler.project import Project
from bundler.engine.report import Report


logger = logging.getLogger(__name__)


@dataclass
class RulesRunResult:
    """Outcome of applying rules to a build.
    
    Attributes:
        packages_processed: Ids of the dirty packages that were processed
        packages_skipped: Ids of the clean packages that were skipped
        files_processed: Number of files that went through a loader chain
        files_skipped: Number of discovered files with no matching loaders
        artifacts_written: Number of extra artifacts written
    """
    packages_processed: List[str] = field(default_factory=list)
    packages_skipped: List[str] = field(default_factory=list)
    files_processed: int = 0
    files_skipped: int = 0
    artifacts_written: int = 0


def _read_text(abs_file: str) -> str:
    # Undecodable bytes survive as surrogates and are restored on write
    with open(abs_file, "r", encoding="utf-8", errors="surrogateescape", newline="") as f:
        return f.read()


class RulesOrchestrator:
    """Runs configured rules over the root package and its dependencies.
    
    Example:
        >>> orchestrator = RulesOrchestrator(project)
        >>> result = asyncio.run(orchestrator.run(root_pkg, dep_pkgs))
    """
    
    def __init__(
        self,
        project: Project,
        report: Optional[Report] = None,
        writer: Optional[ResultWriter] = None,
    ):
        """Initialize the orchestrator.
        
        Args:
            project: Project whose configuration drives the run
            report: Report receiving per-file diagnostics (created if not provided)
            writer: Result writer (created if not provided)
        """
        self.project = project
        self.report = report or Report()
        self.writer = writer or ResultWriter(project)
    
    async def run(
        self,
        root_pkg: PackageDescriptor,
        dep_pkgs: Sequence[PackageDescriptor] = (),
    ) -> RulesRunResult:
        """Apply rules to all dirty packages.
        
        Args:
            root_pkg: The project's own package
            dep_pkgs: Dependency packages
            
        Returns:
            RulesRunResult with processing counts
            
        Raises:
            LoaderExecutionError: If a loader fails on any file
            OSError: If a file cannot be read or written
        """
        result = RulesRunResult()
        all_pkgs = [root_pkg, *dep_pkgs]
        dirty_pkgs = [pkg for pkg in all_pkgs if not pkg.clean]
        result.packages_skipped = [pkg.id for pkg in all_pkgs if pkg.clean]
        
        outcomes = await asyncio.gather(
            *(self._process_package(pkg, result) for pkg in dirty_pkgs),
            return_exceptions=True,
        )
        
        for outcome in outcomes:
            if isinstance(outcome, BaseException):
                raise outcome
        
        result.packages_processed = [pkg.id for pkg in dirty_pkgs]
        logger.debug(f"Applied rules to {len(dirty_pkgs)} packages")
        return result
    
    async def _process_package(self, src_pkg: PackageDescriptor, result: RulesRunResult) -> None:
        logger.debug(f"Applying rules to package '{src_pkg.id}'...")
        
        dest_pkg = src_pkg.clone(dir=get_dest_dir(self.project, src_pkg))
        if os.path.normcase(dest_pkg.dir) == os.path.normcase(src_pkg.dir):
            raise ConfigurationError(
                f"Output directory of package '{src_pkg.id}' is its source directory: {src_pkg.dir}"
            )
        
        prj_src_files = await asyncio.to_thread(find_package_files, self.project, src_pkg)
        
        async def process(prj_src_file: str) -> None:
            await self._process_file(src_pkg, dest_pkg, prj_src_file, result)
        
        await run_in_chunks(prj_src_files, self.project.max_parallel_files, 0, process)
    
    async def _process_file(
        self,
        src_pkg: PackageDescriptor,
        dest_pkg: PackageDescriptor,
        prj_src_file: str,
        result: RulesRunResult,
    ) -> None:
        abs_src_file = self.project.absolute(prj_src_file)
        loaders = self.project.rules.loaders_for_file(abs_src_file)
        
        if not loaders:
            result.files_skipped += 1
            return
        
        context = FileContext(
            content=await asyncio.to_thread(_read_text, abs_src_file),
            file_path=prj_src_file,
        )
        
        await run_loaders(loaders, context)
        write_result = await self.writer.write(src_pkg, dest_pkg, context)
        self.report.rules_run(prj_src_file, context.log)
        
        result.files_processed += 1
        result.artifacts_written += len(write_result.artifact_paths)
