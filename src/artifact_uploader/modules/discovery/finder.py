"""
Glob-based discovery of the files that make up an artifact.

A search path is one pattern per line. Lines starting with `!` exclude
matches, `**` recurses, and a directory pattern expands to every file below
it. The root directory that object keys are made relative to is the searched
directory itself for a single literal directory, the parent for a single
literal file, and otherwise the least common ancestor of the pattern roots.
"""

from __future__ import annotations

import fnmatch
import glob
import logging
import os
from collections import OrderedDict
from pathlib import Path

from ...core.contracts import DiscoveredFileSet
from ...core.errors import DiscoveryError

logger = logging.getLogger(__name__)

_GLOB_CHARS = frozenset("*?[")


def _has_glob(part: str) -> bool:
    return any(char in _GLOB_CHARS for char in part)


def _pattern_root(pattern: Path) -> Path:
    """Longest leading portion of `pattern` that contains no glob characters."""
    parts: list[str] = []
    for part in pattern.parts:
        if _has_glob(part):
            break
        parts.append(part)
    if not parts:
        return Path.cwd()
    return Path(*parts)


def _excluded(path: str, excludes: list[str]) -> bool:
    for pattern in excludes:
        if fnmatch.fnmatch(path, pattern) or path.startswith(pattern.rstrip(os.sep) + os.sep):
            return True
    return False


class GlobFileFinder:
    """Resolve newline-separated search expressions into a `DiscoveredFileSet`."""

    def __init__(self, *, base_dir: str | Path | None = None, follow_symlinks: bool = True) -> None:
        self._base_dir = Path(base_dir) if base_dir else None
        self._follow_symlinks = follow_symlinks

    def find(self, search_path: str) -> DiscoveredFileSet:
        includes, excludes = self._parse(search_path)
        matched: OrderedDict[str, None] = OrderedDict()
        for pattern in includes:
            for path in self._expand(pattern):
                matched.setdefault(str(path), None)

        files = [path for path in matched if not _excluded(path, excludes)]
        root = self._root_directory(includes)
        logger.debug(
            "Search path %r matched %d files (%d excluded) under %s",
            search_path,
            len(files),
            len(matched) - len(files),
            root,
        )
        return DiscoveredFileSet(root_directory=str(root), files=files)

    def _absolute(self, raw: str) -> Path:
        path = Path(os.path.expanduser(raw))
        if not path.is_absolute():
            path = (self._base_dir or Path.cwd()) / path
        return Path(os.path.normpath(path))

    def _parse(self, search_path: str) -> tuple[list[Path], list[str]]:
        if search_path is None or not search_path.strip():
            raise DiscoveryError("Search path must contain at least one pattern.")
        includes: list[Path] = []
        excludes: list[str] = []
        for line in search_path.splitlines():
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            if line.startswith("!"):
                pattern = line[1:].strip()
                if not pattern:
                    raise DiscoveryError("Exclude pattern '!' must be followed by a path.")
                excludes.append(str(self._absolute(pattern)))
                continue
            includes.append(self._absolute(line))
        if not includes:
            raise DiscoveryError(f"Search path '{search_path}' has no include patterns.")
        return includes, excludes

    def _expand(self, pattern: Path) -> list[Path]:
        try:
            candidates = sorted(glob.glob(str(pattern), recursive=True))
        except (OSError, ValueError) as exc:
            raise DiscoveryError(f"Invalid search pattern '{pattern}': {exc}") from exc
        results: list[Path] = []
        for candidate in candidates:
            path = Path(candidate)
            if path.is_dir():
                results.extend(self._walk(path))
            elif path.is_file():
                results.append(path)
        return results

    def _walk(self, directory: Path) -> list[Path]:
        files: list[Path] = []
        visited: set[tuple[int, int]] = set()
        for current, dirnames, filenames in os.walk(directory, followlinks=self._follow_symlinks):
            stat = os.stat(current)
            visited.add((stat.st_dev, stat.st_ino))
            kept = []
            for name in sorted(dirnames):
                try:
                    child = os.stat(os.path.join(current, name))
                except OSError:
                    continue
                if (child.st_dev, child.st_ino) in visited:
                    logger.debug("Skipping already visited directory %s", Path(current) / name)
                    continue
                visited.add((child.st_dev, child.st_ino))
                kept.append(name)
            dirnames[:] = kept
            for name in sorted(filenames):
                files.append(Path(current) / name)
        return files

    def _root_directory(self, includes: list[Path]) -> Path:
        if len(includes) == 1 and not any(_has_glob(part) for part in includes[0].parts):
            single = includes[0]
            return single if single.is_dir() else single.parent
        roots = [_pattern_root(pattern) for pattern in includes]
        roots = [root.parent if root.is_file() else root for root in roots]
        try:
            return Path(os.path.commonpath([str(root) for root in roots]))
        except ValueError as exc:
            raise DiscoveryError(
                f"Search patterns do not share a common root directory: {exc}"
            ) from exc


__all__ = ["GlobFileFinder"]
