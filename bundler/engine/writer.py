"""
Result writer.

Persists the outcome of a file's loader chain into the destination package:
the final content (unless it is None) and every defined extra artifact.
Paths are taken relative to the source package directory; for the root
package the configured source directory prefix is stripped so `src/a.js`
lands at `<build>/a.js`.

Writes are not transactional: a failure leaves already written files in place.
"""

import asyncio
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence, TYPE_CHECKING

from bundler.engine.context import FileContext

if TYPE_CHECKING:
    from bundler.packages import PackageDescriptor
    from bundler.project import Project


logger = logging.getLogger(__name__)

# Source tag of diagnostics emitted by the bundler itself
LOG_SOURCE = "bundle-pipeline"


@dataclass
class WriteResult:
    """Files written for one processed file.
    
    Attributes:
        output_path: Absolute path of the written content (None if not written)
        artifact_paths: Absolute paths of written extra artifacts
    """
    output_path: Optional[str] = None
    artifact_paths: List[str] = field(default_factory=list)


def strip_source_dir(pkg_file: str, sources: Sequence[str]) -> str:
    """Strip the first matching source directory prefix from a POSIX path.
    
    Example:
        >>> strip_source_dir("src/a/b.js", ["src"])
        'a/b.js'
    """
    for source in sources:
        if source in ("", "."):
            continue
        prefix = f"{source}/"
        if pkg_file.startswith(prefix):
            return pkg_file[len(prefix):]
    
    return pkg_file


def _write_text(abs_file: str, content: str) -> None:
    Path(abs_file).parent.mkdir(parents=True, exist_ok=True)
    with open(abs_file, "w", encoding="utf-8", errors="surrogateescape", newline="") as f:
        f.write(content)


class ResultWriter:
    """Writes loader results into destination packages.
    
    Example:
        >>> writer = ResultWriter(project)
        >>> result = await writer.write(src_pkg, dest_pkg, context)
    """
    
    def __init__(self, project: "Project"):
        self._project = project
    
    def dest_file_path(
        self,
        src_pkg: "PackageDescriptor",
        dest_pkg: "PackageDescriptor",
        prj_file: str,
    ) -> str:
        """Absolute destination path of a project-relative file."""
        pkg_file = Path(os.path.relpath(self._project.absolute(prj_file), src_pkg.dir)).as_posix()
        
        if dest_pkg.is_root:
            pkg_file = strip_source_dir(pkg_file, self._project.sources)
        
        return os.path.normpath(os.path.join(dest_pkg.dir, *pkg_file.split("/")))
    
    async def write(
        self,
        src_pkg: "PackageDescriptor",
        dest_pkg: "PackageDescriptor",
        context: FileContext,
    ) -> WriteResult:
        """Write a context's content and extra artifacts.
        
        Args:
            src_pkg: Package the file was read from
            dest_pkg: Package the results are written to
            context: The file's context after its loader chain ran
            
        Returns:
            WriteResult describing what was written
            
        Raises:
            OSError: If a file cannot be written
        """
        result = WriteResult()
        
        if context.content is not None:
            abs_file = self.dest_file_path(src_pkg, dest_pkg, context.file_path)
            await asyncio.to_thread(_write_text, abs_file, context.content)
            result.output_path = abs_file
        
        for prj_extra_file, content in list(context.extra_artifacts.items()):
            if content is None:
                continue
            
            abs_file = self.dest_file_path(src_pkg, dest_pkg, prj_extra_file)
            await asyncio.to_thread(_write_text, abs_file, content)
            result.artifact_paths.append(abs_file)
            
            context.log.info(LOG_SOURCE, f"Rules generated extra artifact: {prj_extra_file}")
        
        logger.debug(
            f"Wrote {context.file_path}: content={result.output_path is not None}, "
            f"artifacts={len(result.artifact_paths)}"
        )
        return result
