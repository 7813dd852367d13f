"""
System matcher - decides which system a folder or file belongs to
"""

import logging
import os
from typing import Dict, List, Mapping, Optional, Tuple

from .errors import UnknownSystemError
from .models import System
from .systems import SYSTEMS

logger = logging.getLogger(__name__)

ARCHIVE_EXT = '.zip'


def matches_system_folder(system: System, dir_name: str) -> bool:
    """Case-insensitive exact match of a directory name against a system's folders."""
    name = dir_name.lower()
    return any(folder.lower() == name for folder in system.folders)


def matches_system_file(system: System, path: str) -> bool:
    """
    Check a file path against every extension in every slot of a system.

    Works the same for real paths and for virtual paths inside an archive.
    """
    lowered = path.lower()
    for file_type in system.file_types:
        for ext in file_type.extensions:
            if lowered.endswith(ext):
                return True
    return False


def is_archive(path: str) -> bool:
    return path.lower().endswith(ARCHIVE_EXT)


def best_system_match(path: str, catalog: Mapping[str, System] = None) -> System:
    """
    Find the system for a path by matching its ancestor folder names.

    The deepest matching folder wins. Segments inside an archive are ignored.
    """
    catalog = SYSTEMS if catalog is None else catalog
    segments = []
    for part in path.split('/'):
        if is_archive(part):
            break
        if part:
            segments.append(part)

    for part in reversed(segments):
        for system in catalog.values():
            if matches_system_folder(system, part):
                return system

    raise UnknownSystemError(f"no system matches path: {path}")


def _match_system_folder(path: str, catalog: Mapping[str, System]) -> List[Tuple[str, str]]:
    if not os.path.isdir(path):
        return []
    name = os.path.basename(path)
    return [(system_id, path) for system_id, system in catalog.items()
            if matches_system_folder(system, name)]


def find_system_folders(root: str, catalog: Mapping[str, System] = None) -> List[Tuple[str, str]]:
    """
    List ``(system_id, path)`` pairs for system folders directly under root.

    A ``games`` subfolder is searched the same way. Missing or unreadable
    roots give an empty list.
    """
    catalog = SYSTEMS if catalog is None else catalog
    found = []

    if not os.path.isdir(root):
        return found

    try:
        names = sorted(os.listdir(root))
    except OSError as e:
        logger.warning("cannot read games folder %s: %s", root, e)
        return found

    for name in names:
        abs_path = os.path.join(root, name)
        if name.lower() == 'games' and os.path.isdir(abs_path):
            found.extend(find_system_folders(abs_path, catalog))
        found.extend(_match_system_folder(abs_path, catalog))

    return found


def get_system_paths(games_folders: List[str],
                     catalog: Mapping[str, System] = None) -> Dict[str, List[str]]:
    """Map each system id to its folders across all configured roots."""
    paths: Dict[str, List[str]] = {}
    for root in games_folders:
        for system_id, path in find_system_folders(root, catalog):
            paths.setdefault(system_id, []).append(path)
    return paths


def split_archive_path(path: str) -> Optional[Tuple[str, str]]:
    """
    Split a path at its first ``.zip`` segment.

    Returns ``(archive_path, relative_path)`` or None when the path does not
    cross into an archive. The relative path has no leading slash and may be
    empty.
    """
    parts = path.split('/')
    for i, part in enumerate(parts):
        if is_archive(part):
            return '/'.join(parts[:i + 1]), '/'.join(parts[i + 1:])
    return None
