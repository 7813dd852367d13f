"""
Games browser - lists one folder level at a time, including inside zip files
"""

import logging
import os
from datetime import datetime
from typing import Dict, List, Mapping, Optional

from .archive_cache import ArchiveIndexCache
from .errors import InvalidPathError
from .matcher import ARCHIVE_EXT, best_system_match, split_archive_path
from .models import BrowseItem, BrowseResult, FileEntry, FolderResult, System
from .systems import SYSTEMS

logger = logging.getLogger(__name__)


def _is_under(path: str, root: str) -> bool:
    root = root.rstrip('/')
    return path != root and path.startswith(root + '/')


class GameBrowser:
    """Browses the configured games folders for a remote file picker"""

    def __init__(self, games_folders: List[str],
                 cache: Optional[ArchiveIndexCache] = None,
                 catalog: Optional[Mapping[str, System]] = None):
        self.games_folders = [os.path.abspath(f) for f in games_folders]
        self.cache = cache if cache is not None else ArchiveIndexCache()
        self.catalog = SYSTEMS if catalog is None else catalog

    def get_games_folders(self) -> List[FolderResult]:
        """
        Find the root folder of each system.

        Only direct children of the configured games folders are checked,
        against every folder name a system accepts. The first folder found
        for a system wins.
        """
        folder_names: Dict[str, System] = {}
        for system in self.catalog.values():
            for folder in system.folders:
                folder_names.setdefault(folder.lower(), system)

        results: Dict[str, FolderResult] = {}
        for root in self.games_folders:
            if not os.path.isdir(root):
                continue
            try:
                names = sorted(os.listdir(root))
            except OSError as e:
                logger.warning("cannot read games folder %s: %s", root, e)
                continue

            for name in names:
                path = os.path.join(root, name)
                if not os.path.isdir(path):
                    continue
                system = folder_names.get(name.lower())
                if system is None or system.id in results:
                    continue
                results[system.id] = FolderResult(system=system, path=path)

        return list(results.values())

    def _list_archive(self, zip_file: str, zip_path: str) -> List[FileEntry]:
        prefix = zip_path.strip('/')
        if prefix:
            prefix += '/'
        depth = prefix.count('/')

        files = []
        for entry in self.cache.list(zip_file):
            if not entry.startswith(prefix):
                continue
            if entry.count('/') > depth:
                continue
            files.append(FileEntry(path=entry, name=os.path.basename(entry)))
        return files

    def _list_folder(self, path: str) -> List[FileEntry]:
        files = []
        with os.scandir(path) as it:
            for entry in it:
                try:
                    info = entry.stat()
                    is_dir = entry.is_dir()
                except OSError:
                    continue
                files.append(FileEntry(
                    path=entry.path,
                    name=entry.name,
                    size=0 if is_dir else info.st_size,
                    is_dir=is_dir,
                    modified=datetime.fromtimestamp(info.st_mtime),
                ))
        return files

    def list_path(self, path: str) -> List[BrowseItem]:
        """List the games and folders directly inside ``path``."""
        system = best_system_match(path, self.catalog)
        logger.info("system: %s", system.id)

        split = split_archive_path(path)
        in_zip = split is not None
        if in_zip:
            files = self._list_archive(*split)
        else:
            files = self._list_folder(path)

        valid_filetypes = [] if in_zip else [ARCHIVE_EXT]
        valid_filetypes.extend(system.extensions)
        logger.debug("valid filetypes: %s", valid_filetypes)

        items = []
        for f in files:
            friendly_name, ext = os.path.splitext(f.name)
            if not f.is_dir and ext.lower() not in valid_filetypes:
                continue

            full_path = os.path.join(path, f.name)
            items.append(BrowseItem(
                name=friendly_name,
                path=full_path,
                parent=path,
                filename=f.name,
                extension=ext,
                next=full_path if f.is_dir else None,
                modified=f.modified,
                size=f.size,
            ))

        items.sort(key=lambda i: (i.next is None, i.filename.lower()))
        return items

    def list_games_folder(self, path: str) -> BrowseResult:
        """
        Build the listing for a browse request.

        An empty path lists the system folders. Any other path must be inside
        a configured games folder, or be one of the system folders.
        """
        system_folders = self.get_games_folders()

        if not path:
            items = []
            for folder in system_folders:
                name = os.path.basename(folder.path)
                items.append(BrowseItem(
                    name=name,
                    path=folder.path,
                    parent=path,
                    filename=name,
                    extension=os.path.splitext(folder.path)[1],
                    next=folder.path,
                    type='folder',
                ))
            return BrowseResult(up=None, items=items)

        path = os.path.abspath(path)
        lowered = path.lower()
        folder_paths = {f.path.lower() for f in system_folders}

        at_root = lowered in folder_paths
        if not at_root and not any(_is_under(lowered, root.lower())
                                   for root in self.games_folders):
            logger.error("invalid path: %s", path)
            raise InvalidPathError(f"invalid path: {path}")

        up = '' if at_root else os.path.dirname(path)
        return BrowseResult(up=up, items=self.list_path(path))
