"""
Existence checks for real files and files inside zip archives
"""

import logging
import os
import re
from typing import Optional

from .archive_cache import ArchiveIndexCache
from .errors import RomIndexError

logger = logging.getLogger(__name__)

ZIP_PATH_RE = re.compile(r'^(.*?\.zip)/(.+)$', re.IGNORECASE)


class FileChecker:
    """Answers whether a path exists, looking inside zip files when needed"""

    def __init__(self, cache: Optional[ArchiveIndexCache] = None):
        self.cache = cache if cache is not None else ArchiveIndexCache()

    def exists(self, path: str) -> bool:
        """
        True if ``path`` is a real filesystem entry, or has the shape
        ``<archive>.zip/<entry>`` and the archive lists that entry.

        Never raises; an unreadable archive counts as missing.
        """
        if os.path.exists(path):
            return True

        match = ZIP_PATH_RE.match(path)
        if not match:
            return False

        zip_path, entry = match.group(1), match.group(2)
        try:
            return self.cache.contains(zip_path, entry)
        except (RomIndexError, OSError) as e:
            logger.debug("treating %s as missing: %s", path, e)
            return False


def file_exists(path: str) -> bool:
    """One-off existence check that does not keep archive listings around."""
    return FileChecker(ArchiveIndexCache()).exists(path)
