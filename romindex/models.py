"""
Data models for the ROM indexer
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional, Tuple


@dataclass(frozen=True)
class FileType:
    """A slot of accepted file extensions for a system"""
    label: str
    extensions: Tuple[str, ...]

    def to_dict(self) -> Dict:
        return {
            'label': self.label,
            'extensions': list(self.extensions),
        }


@dataclass(frozen=True)
class System:
    """A supported game platform and its folder/extension rules"""
    id: str
    name: str
    folders: Tuple[str, ...]
    file_types: Tuple[FileType, ...] = ()

    @property
    def extensions(self) -> List[str]:
        exts = []
        for file_type in self.file_types:
            for ext in file_type.extensions:
                if ext not in exts:
                    exts.append(ext)
        return exts

    def to_dict(self) -> Dict:
        return {
            'id': self.id,
            'name': self.name,
            'folders': list(self.folders),
            'file_types': [ft.to_dict() for ft in self.file_types],
            'extensions': self.extensions,
        }


@dataclass
class FileEntry:
    """A file or directory seen while listing a path"""
    path: str
    name: str
    size: int = 0
    is_dir: bool = False
    modified: Optional[datetime] = None


@dataclass
class BrowseItem:
    """One row of a browse listing"""
    name: str
    path: str
    parent: str
    filename: str
    extension: str
    next: Optional[str] = None
    modified: Optional[datetime] = None
    size: int = 0
    type: str = ""

    def to_dict(self) -> Dict:
        d = {
            'name': self.name,
            'path': self.path,
            'parent': self.parent,
            'filename': self.filename,
            'extension': self.extension,
            'next': self.next,
            'modified': self.modified.isoformat() if self.modified else None,
            'size': self.size,
        }
        if self.type:
            d['type'] = self.type
        return d


@dataclass
class BrowseResult:
    """A navigable listing of one directory level.

    ``up`` is None at the top-level system list, an empty string when the
    listing is a system root folder, otherwise the parent directory.
    """
    up: Optional[str]
    items: List[BrowseItem] = field(default_factory=list)

    def to_dict(self) -> Dict:
        return {
            'up': self.up,
            'items': [item.to_dict() for item in self.items],
        }


@dataclass
class FolderResult:
    """A discovered per-system root folder"""
    system: System
    path: str

    def to_dict(self) -> Dict:
        return {
            'system': self.system.to_dict(),
            'path': self.path,
        }
