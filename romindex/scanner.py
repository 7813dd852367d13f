"""
File scanner for ROM files
"""

import logging
import os
from typing import Callable, List, Mapping, Optional, Set, Tuple

from .archive_cache import ArchiveIndexCache
from .errors import InvalidRootError
from .matcher import is_archive, matches_system_file
from .models import System
from .systems import SYSTEMS, get_system

logger = logging.getLogger(__name__)


def resolve_link(link_path: str) -> str:
    """
    Resolve a symbolic link to its real path.

    A relative link target is joined to the directory holding the link, never
    to the process working directory.
    """
    target = os.readlink(link_path)
    if not os.path.isabs(target):
        link_dir = os.path.dirname(os.path.abspath(link_path))
        target = os.path.join(link_dir, target)
    return os.path.realpath(target)


def rebase_path(path: str, old_prefix: str, new_prefix: str) -> str:
    """Swap a leading directory prefix of ``path``."""
    if path == old_prefix:
        return new_prefix
    if path.startswith(old_prefix.rstrip(os.sep) + os.sep):
        return new_prefix.rstrip(os.sep) + path[len(old_prefix.rstrip(os.sep)):]
    return path


def _first_by_basename(items: list, path_of: Callable) -> list:
    seen: Set[str] = set()
    filtered = []
    for item in items:
        name = os.path.basename(path_of(item))
        if name in seen:
            continue
        seen.add(name)
        filtered.append(item)
    return filtered


class FileScanner:
    """Finds every file of a system under a folder, looking inside zip files"""

    def __init__(self, cache: Optional[ArchiveIndexCache] = None,
                 catalog: Optional[Mapping[str, System]] = None):
        self.cache = cache if cache is not None else ArchiveIndexCache()
        self.catalog = SYSTEMS if catalog is None else catalog

    def get_files(self, system_id: str, path: str) -> List[str]:
        """
        Search for all valid games of a system under a path.

        Zip files are listed as if they were folders and symlinks are
        followed at every level. Results are always reported under ``path``,
        even where a symlink points somewhere else on disk.

        Args:
            system_id: Catalog id of the system to match
            path: Root folder to scan

        Returns:
            List of matching file paths, in no particular order. Files inside
            a zip are reported as ``<archive>/<entry>``.
        """
        system = get_system(system_id, self.catalog)

        try:
            is_link = os.path.islink(path)
            real_root = resolve_link(path) if is_link else path
        except FileNotFoundError:
            raise InvalidRootError(f"root does not exist: {path}") from None

        if not os.path.exists(real_root):
            raise InvalidRootError(f"root does not exist: {path}")
        if not os.path.isdir(real_root):
            raise InvalidRootError(f"root is not a directory: {path}")

        logger.info("scanning %s for %s", path, system.id)
        visited: Set[str] = set()
        results = self._walk(system, real_root, visited)

        if real_root != path:
            results = [rebase_path(r, real_root, path) for r in results]

        logger.info("found %d %s files in %s", len(results), system.id, path)
        return results

    def _walk(self, system: System, directory: str, visited: Set[str]) -> List[str]:
        resolved = os.path.realpath(directory)
        if resolved in visited:
            logger.debug("skipping already visited folder: %s", directory)
            return []
        visited.add(resolved)

        results: List[str] = []
        with os.scandir(directory) as it:
            entries = sorted(it, key=lambda e: e.name)

        for entry in entries:
            if entry.is_symlink():
                target = resolve_link(entry.path)
                if os.path.isdir(target):
                    found = self._walk(system, target, visited)
                    results.extend(rebase_path(r, target, entry.path) for r in found)
                    continue
                if not os.path.exists(target):
                    raise FileNotFoundError(f"broken symlink: {entry.path} -> {target}")
                results.extend(self._match_file(system, entry.path))
            elif entry.is_dir(follow_symlinks=False):
                results.extend(self._walk(system, entry.path, visited))
            else:
                results.extend(self._match_file(system, entry.path))

        return results

    def _match_file(self, system: System, path: str) -> List[str]:
        if is_archive(path):
            return [os.path.join(path, name) for name in self.cache.list(path)
                    if matches_system_file(system, name)]
        if matches_system_file(system, path):
            return [path]
        return []

    def get_all_files(self, system_paths: Mapping[str, List[str]],
                      status_fn: Optional[Callable[[str, str], None]] = None
                      ) -> List[Tuple[str, str]]:
        """
        Scan every folder of every system.

        Args:
            system_paths: System id -> folders to scan
            status_fn: Optional callback(system_id, path) before each scan

        Returns:
            List of (system_id, file_path) pairs. The first failing scan
            aborts the whole run.
        """
        all_files: List[Tuple[str, str]] = []
        for system_id, paths in system_paths.items():
            for path in paths:
                if status_fn:
                    status_fn(system_id, path)
                for file_path in self.get_files(system_id, path):
                    all_files.append((system_id, file_path))
        return all_files

    @staticmethod
    def filter_unique_filenames(files: List[str]) -> List[str]:
        """Keep the first file for each distinct base name, in input order."""
        return _first_by_basename(files, lambda file_path: file_path)

    @staticmethod
    def filter_unique_pairs(files: List[Tuple[str, str]]) -> List[Tuple[str, str]]:
        """filter_unique_filenames for (system_id, path) pairs from get_all_files."""
        return _first_by_basename(files, lambda pair: pair[1])
