"""
Archive index cache - remembers the entry list of every zip file read
"""

import logging
import threading
import zipfile
from typing import Callable, Dict, Optional, Sequence, Tuple

from .errors import ArchiveReadError

logger = logging.getLogger(__name__)


def list_zip(path: str) -> list:
    """
    List the file entries of a zip archive.

    Only the central directory is read; nothing is decompressed. Directory
    entries are skipped and names always use forward slashes.
    """
    try:
        with zipfile.ZipFile(path, 'r') as zf:
            return [info.filename.replace('\\', '/')
                    for info in zf.infolist() if not info.is_dir()]
    except (zipfile.BadZipFile, zipfile.LargeZipFile, OSError, ValueError) as e:
        raise ArchiveReadError(path, str(e)) from e


class ArchiveIndexCache:
    """
    Thread-safe cache of archive path -> entry names.

    Entries are filled lazily on first lookup and kept for the lifetime of
    the cache. Failed reads are never stored.
    """

    def __init__(self, reader: Optional[Callable[[str], Sequence[str]]] = None):
        self._reader = reader or list_zip
        self._lock = threading.Lock()
        self._entries: Dict[str, Tuple[str, ...]] = {}

    def list(self, archive_path: str) -> Tuple[str, ...]:
        """Return the entries of an archive, reading it only on the first call."""
        with self._lock:
            cached = self._entries.get(archive_path)
            if cached is not None:
                return cached

            entries = tuple(self._reader(archive_path))
            self._entries[archive_path] = entries
            logger.debug("cached %d entries for %s", len(entries), archive_path)
            return entries

    def get(self, archive_path: str) -> Optional[Tuple[str, ...]]:
        """Return cached entries without reading the archive."""
        with self._lock:
            return self._entries.get(archive_path)

    def contains(self, archive_path: str, entry: str) -> bool:
        return entry in self.list(archive_path)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, archive_path: str) -> bool:
        with self._lock:
            return archive_path in self._entries
