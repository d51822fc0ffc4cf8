"""
Package descriptors.

A PackageDescriptor identifies the root project package or one of its
npm dependencies, either as a source (inside the project) or as a
destination (inside the build directory). Descriptors are immutable; the
destination variant of a package is obtained with `clone`.
"""

import json
import logging
import os
from dataclasses import dataclass, replace
from typing import Dict, List, Optional, TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from bundler.errors import PackageResolutionError

if TYPE_CHECKING:
    from bundler.project import Project


logger = logging.getLogger(__name__)


class PackageJson(BaseModel):
    """The subset of package.json the bundler relies on."""
    model_config = ConfigDict(extra="ignore")
    
    name: str = Field(..., min_length=1)
    version: str = Field(..., min_length=1)
    dependencies: Dict[str, str] = Field(default_factory=dict)


@dataclass(frozen=True)
class PackageDescriptor:
    """Identifies a source or destination package.
    
    Attributes:
        id: Unique identifier (`name@version`)
        name: Package name
        version: Package version
        dir: Absolute package directory
        is_root: True for the project's own package
        clean: True when the package needs no processing in this pass
    """
    id: str
    name: str
    version: str
    dir: str
    is_root: bool = False
    clean: bool = False
    
    @classmethod
    def create(cls, name: str, version: str, dir: str, is_root: bool = False,
               clean: bool = False) -> "PackageDescriptor":
        return cls(
            id=f"{name}@{version}",
            name=name,
            version=version,
            dir=os.path.abspath(dir),
            is_root=is_root,
            clean=clean,
        )
    
    def clone(self, **changes) -> "PackageDescriptor":
        """Copy of this descriptor with some attributes changed."""
        if "dir" in changes:
            changes["dir"] = os.path.abspath(changes["dir"])
        return replace(self, **changes)


def get_package_target_dir(name: str, version: str) -> str:
    """Directory name of a dependency inside the build's node_modules."""
    return f"{name}@{version}".replace("/", "%2F")


def get_dest_dir(project: "Project", pkg: PackageDescriptor) -> str:
    """Absolute output directory of a package.
    
    The root package goes to the build directory itself and dependencies
    to `<build>/node_modules/<name>@<version>`.
    """
    build_dir = os.path.join(project.dir, project.build_dir)
    if pkg.is_root:
        return os.path.normpath(build_dir)
    return os.path.normpath(os.path.join(
        build_dir, "node_modules", get_package_target_dir(pkg.name, pkg.version)
    ))


def read_package_json(pkg_dir: str) -> PackageJson:
    """Read and validate a package.json file.
    
    Raises:
        PackageResolutionError: If the file is missing or invalid
    """
    pkg_json_path = os.path.join(pkg_dir, "package.json")
    try:
        with open(pkg_json_path, "r", encoding="utf-8") as f:
            data = json.load(f)
        return PackageJson.model_validate(data)
    except FileNotFoundError as e:
        raise PackageResolutionError(
            f"No package.json found in {pkg_dir}", package_path=pkg_dir
        ) from e
    except (json.JSONDecodeError, ValidationError) as e:
        raise PackageResolutionError(
            f"Invalid package.json in {pkg_dir}: {e}", package_path=pkg_dir
        ) from e


def load_root_package(project: "Project") -> PackageDescriptor:
    """Descriptor of the project's own package."""
    pkg_json = read_package_json(project.dir)
    return PackageDescriptor.create(pkg_json.name, pkg_json.version, project.dir, is_root=True)


def _resolve_dependency_dir(name: str, from_dir: str, project_dir: str) -> Optional[str]:
    """Locate a dependency the way Node does: own node_modules, then ancestors."""
    current = from_dir
    project_dir = os.path.abspath(project_dir)
    
    while True:
        candidate = os.path.join(current, "node_modules", *name.split("/"))
        if os.path.isfile(os.path.join(candidate, "package.json")):
            return candidate
        if os.path.normcase(current) == os.path.normcase(project_dir):
            return None
        parent = os.path.dirname(current)
        if parent == current:
            return None
        current = parent


def find_dependency_packages(project: "Project", clean: bool = False) -> List[PackageDescriptor]:
    """Resolve all installed dependencies of the root package, transitively.
    
    Args:
        project: The project being bundled
        clean: Mark every dependency as clean (skipped by rule processing)
        
    Returns:
        Dependency descriptors de-duplicated by `name@version`, in
        resolution order
    """
    root_json = read_package_json(project.dir)
    
    found: Dict[str, PackageDescriptor] = {}
    visited_dirs = set()
    pending = [(name, project.dir) for name in root_json.dependencies]
    
    while pending:
        name, from_dir = pending.pop(0)
        pkg_dir = _resolve_dependency_dir(name, from_dir, project.dir)
        
        if pkg_dir is None:
            logger.warning(f"Dependency '{name}' required from {from_dir} is not installed")
            continue
        if pkg_dir in visited_dirs:
            continue
        visited_dirs.add(pkg_dir)
        
        pkg_json = read_package_json(pkg_dir)
        pkg = PackageDescriptor.create(pkg_json.name, pkg_json.version, pkg_dir, clean=clean)
        found.setdefault(pkg.id, pkg)
        
        pending.extend((dep, pkg_dir) for dep in pkg_json.dependencies)
    
    logger.debug(f"Resolved {len(found)} dependency package(s)")
    return list(found.values())
