"""
romindex - Find and browse game ROMs in folders and zip archives

Scans per-system game folders, treating zip files as folders, and serves a
one-level-at-a-time browser over them.
"""

__version__ = '1.0.0'
__author__ = 'romindex'

from .errors import (
    RomIndexError, InvalidRootError, ArchiveReadError,
    InvalidPathError, UnknownSystemError,
)
from .models import (
    FileType, System, FileEntry, BrowseItem, BrowseResult, FolderResult,
)
from .systems import SYSTEMS, systems_by_id, get_system, lookup_system
from .matcher import (
    matches_system_folder, matches_system_file, best_system_match,
    find_system_folders, get_system_paths,
)
from .archive_cache import ArchiveIndexCache, list_zip
from .scanner import FileScanner
from .checker import FileChecker, file_exists
from .browser import GameBrowser


__all__ = [
    'RomIndexError',
    'InvalidRootError',
    'ArchiveReadError',
    'InvalidPathError',
    'UnknownSystemError',
    'FileType',
    'System',
    'FileEntry',
    'BrowseItem',
    'BrowseResult',
    'FolderResult',
    'SYSTEMS',
    'systems_by_id',
    'get_system',
    'lookup_system',
    'matches_system_folder',
    'matches_system_file',
    'best_system_match',
    'find_system_folders',
    'get_system_paths',
    'ArchiveIndexCache',
    'list_zip',
    'FileScanner',
    'FileChecker',
    'file_exists',
    'GameBrowser',
]


def run_web(host=None, port=None):
    """Run the web API"""
    from .web import run_server
    run_server(host, port)
