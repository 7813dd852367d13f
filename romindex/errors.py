"""
Exceptions raised by the indexer
"""


class RomIndexError(Exception):
    """Base class for indexer errors"""


class InvalidRootError(RomIndexError):
    """Scan root is missing or is not a directory"""


class ArchiveReadError(RomIndexError):
    """An archive could not be opened or its directory table parsed"""

    def __init__(self, path: str, reason: str = ""):
        self.path = path
        self.reason = reason
        msg = f"cannot read archive: {path}"
        if reason:
            msg = f"{msg} ({reason})"
        super().__init__(msg)


class InvalidPathError(RomIndexError):
    """Browse path falls outside the configured game folders"""


class UnknownSystemError(RomIndexError):
    """System identifier or folder is not in the catalog"""
