"""
File discovery.

Resolves glob patterns against a directory tree into a sorted list of
base-relative POSIX paths. Patterns prefixed with `!` exclude matches.

Supported syntax: `*`, `?`, `[...]`, `{a,b}` and `**` (any number of path
segments). Wildcards never match a leading `.` of a path segment unless the
pattern segment itself starts with `.`.

The stdlib `glob` and `fnmatch` modules are not used: they have no `{a,b}`
alternation and no `!` negation, and they cannot prune excluded directories
during the walk.
"""

import logging
import os
import posixpath
import re
from functools import lru_cache
from pathlib import Path
from typing import List, Pattern, TYPE_CHECKING, Union

if TYPE_CHECKING:
    from bundler.packages import PackageDescriptor
    from bundler.project import Project


logger = logging.getLogger(__name__)

NESTED_DEPENDENCIES_GLOB = "!**/node_modules/**/*"

_GLOB_CHARS = set("*?[{")


def expand_braces(pattern: str) -> List[str]:
    """Expand `{a,b}` alternations (not nested) into separate patterns."""
    start = pattern.find("{")
    if start == -1:
        return [pattern]
    end = pattern.find("}", start)
    if end == -1:
        return [pattern]
    
    head, body, tail = pattern[:start], pattern[start + 1:end], pattern[end + 1:]
    expanded = []
    for option in body.split(","):
        expanded.extend(expand_braces(f"{head}{option}{tail}"))
    return expanded


def _translate_segment(segment: str) -> str:
    out = []
    if segment[:1] != "." and segment[:1] in ("*", "?", "["):
        out.append(r"(?!\.)")
    
    i = 0
    while i < len(segment):
        char = segment[i]
        if char == "*":
            out.append("[^/]*")
        elif char == "?":
            out.append("[^/]")
        elif char == "[":
            end = segment.find("]", i + 2)
            if end == -1:
                out.append(re.escape(char))
            else:
                body = segment[i + 1:end]
                if body.startswith("!"):
                    body = "^" + body[1:]
                out.append(f"[{body.replace(chr(92), chr(92) * 2)}]")
                i = end
        else:
            out.append(re.escape(char))
        i += 1
    
    return "".join(out)


@lru_cache(maxsize=512)
def glob_to_regex(pattern: str) -> Pattern:
    """Compile a glob pattern into an anchored regular expression."""
    alternatives = []
    
    for expanded in expand_braces(pattern):
        segments = expanded.split("/")
        regex = ""
        for index, segment in enumerate(segments):
            last = index == len(segments) - 1
            if segment == "**":
                if last:
                    regex += r"(?!\.)[^/]*(?:/(?!\.)[^/]*)*"
                else:
                    regex += r"(?:(?!\.)[^/]+/)*"
                continue
            regex += _translate_segment(segment)
            if not last:
                regex += "/"
        alternatives.append(regex)
    
    return re.compile("(?:" + "|".join(alternatives) + r")\Z")


def glob_matches(pattern: str, path: str) -> bool:
    """Check whether a POSIX relative path matches a glob pattern."""
    return glob_to_regex(pattern).match(path) is not None


def prefix_globs(prefix: str, globs: List[str]) -> List[str]:
    """Prepend a directory prefix to globs, keeping negation markers first.
    
    Example:
        >>> prefix_globs("node_modules/a/", ["**/*", "!test/**"])
        ['node_modules/a/**/*', '!node_modules/a/test/**']
    """
    prefixed = []
    for glob in globs:
        if glob.startswith("!"):
            prefixed.append(f"!{prefix}{glob[1:]}")
        else:
            prefixed.append(f"{prefix}{glob}")
    return prefixed


def _static_base(glob: str) -> str:
    """Longest leading directory path of a glob without wildcards."""
    base = []
    for segment in glob.split("/")[:-1]:
        if _GLOB_CHARS & set(segment):
            break
        base.append(segment)
    return "/".join(base)


def _pruned_dir_pattern(negative: str) -> Union[str, None]:
    for suffix in ("/**/*", "/**"):
        if negative.endswith(suffix):
            return negative[:-len(suffix)]
    return None


def find_files(base_dir: Union[str, Path], globs: List[str]) -> List[str]:
    """Find files under base_dir matching globs.
    
    Args:
        base_dir: Directory the globs are relative to
        globs: Glob patterns; `!`-prefixed ones exclude matches
        
    Returns:
        Sorted base-relative POSIX paths of regular files matching at least
        one positive glob and no negative glob
    """
    base_dir = Path(base_dir)
    positives = [g for g in globs if not g.startswith("!")]
    negatives = [g[1:] for g in globs if g.startswith("!")]
    pruned = [p for p in (_pruned_dir_pattern(n) for n in negatives) if p]
    
    found = set()
    roots = sorted({_static_base(g) for g in positives})
    
    for root in roots:
        start = base_dir / root if root else base_dir
        if not start.is_dir():
            continue
        
        for dirpath, dirnames, filenames in os.walk(start, followlinks=False):
            rel_dir = Path(dirpath).relative_to(base_dir).as_posix()
            rel_dir = "" if rel_dir == "." else rel_dir
            
            dirnames[:] = sorted(
                d for d in dirnames
                if not any(glob_matches(p, posixpath.join(rel_dir, d)) for p in pruned)
            )
            
            for filename in filenames:
                rel_path = posixpath.join(rel_dir, filename)
                if not os.path.isfile(os.path.join(dirpath, filename)):
                    continue
                if not any(glob_matches(g, rel_path) for g in positives):
                    continue
                if any(glob_matches(n, rel_path) for n in negatives):
                    continue
                found.add(rel_path)
    
    return sorted(found)


def package_globs(project: "Project", pkg: "PackageDescriptor") -> List[str]:
    """Project-relative globs selecting the files of a package.
    
    The root package is scoped to the configured source directories and
    dependencies to their whole directory. Nested dependency trees are always
    excluded, and so is the build directory for the root package.
    """
    if pkg.is_root:
        globs = ["**/*" if source == "." else f"{source}/**/*" for source in project.sources]
    else:
        globs = ["**/*"]
    globs.append(NESTED_DEPENDENCIES_GLOB)
    
    pkg_rel_dir = Path(os.path.relpath(pkg.dir, project.dir)).as_posix()
    prefix = "" if pkg_rel_dir == "." else f"{pkg_rel_dir}/"
    prefixed = prefix_globs(prefix, globs)
    
    if pkg.is_root and not project.build_dir.startswith("../"):
        prefixed.append(f"!{project.build_dir}/**/*")
    
    return prefixed


def find_package_files(project: "Project", pkg: "PackageDescriptor") -> List[str]:
    """Project-relative paths of the files of a package, sorted."""
    files = find_files(project.dir, package_globs(project, pkg))
    logger.debug(f"Found {len(files)} file(s) in package '{pkg.id}'")
    return files
