"""
Catalog of supported systems.

Folder names follow the MiSTer games folder layout. The first folder name of
each system is its primary folder, used when discovering system roots.
"""

from types import MappingProxyType
from typing import Dict, Mapping

from .errors import UnknownSystemError
from .models import FileType, System


def _system(system_id: str, name: str, folders, *file_types) -> System:
    return System(
        id=system_id,
        name=name,
        folders=tuple(folders),
        file_types=tuple(
            FileType(label=label, extensions=tuple(e.lower() for e in exts))
            for label, exts in file_types
        ),
    )


_CATALOG = [
    _system('Atari2600', 'Atari 2600', ['Atari2600'],
            ('ROM', ['.a26', '.bin'])),
    _system('Atari7800', 'Atari 7800', ['ATARI7800'],
            ('ROM', ['.a78', '.bin'])),
    _system('AtariLynx', 'Atari Lynx', ['AtariLynx'],
            ('ROM', ['.lnx'])),
    _system('ColecoVision', 'ColecoVision', ['Coleco'],
            ('ROM', ['.col', '.bin', '.rom'])),
    _system('Gameboy', 'Game Boy', ['GAMEBOY'],
            ('ROM', ['.gb'])),
    _system('GameboyColor', 'Game Boy Color', ['GBC'],
            ('ROM', ['.gbc'])),
    _system('GBA', 'Game Boy Advance', ['GBA'],
            ('ROM', ['.gba'])),
    _system('GameGear', 'Game Gear', ['GameGear'],
            ('ROM', ['.gg'])),
    _system('Genesis', 'Genesis', ['Genesis', 'MegaDrive'],
            ('ROM', ['.bin', '.gen', '.md'])),
    _system('MasterSystem', 'Master System', ['SMS'],
            ('ROM', ['.sms'])),
    _system('MegaCD', 'Sega CD', ['MegaCD'],
            ('Disk', ['.cue', '.chd'])),
    _system('NeoGeo', 'Neo Geo MVS/AES', ['NEOGEO'],
            ('ROM set', ['.neo'])),
    _system('NES', 'NES', ['NES'],
            ('ROM', ['.nes']),
            ('FDS', ['.fds']),
            ('NSF', ['.nsf'])),
    _system('PSX', 'Playstation', ['PSX'],
            ('CD', ['.cue', '.chd']),
            ('Exe', ['.exe'])),
    _system('Sega32X', 'Genesis 32X', ['S32X'],
            ('ROM', ['.32x'])),
    _system('SNES', 'SNES', ['SNES'],
            ('ROM', ['.sfc', '.smc', '.bin', '.bs'])),
    _system('TurboGrafx16', 'TurboGrafx-16', ['TGFX16'],
            ('ROM', ['.pce', '.bin']),
            ('SuperGrafx', ['.sgx'])),
    _system('TurboGrafx16CD', 'TurboGrafx-16 CD', ['TGFX16-CD'],
            ('Disk', ['.cue', '.chd'])),
    _system('Vectrex', 'Vectrex', ['VECTREX'],
            ('ROM', ['.vec', '.bin', '.rom']),
            ('Overlay', ['.ovr'])),
    _system('WonderSwan', 'WonderSwan', ['WonderSwan'],
            ('ROM', ['.ws'])),
    _system('WonderSwanColor', 'WonderSwan Color', ['WonderSwanColor'],
            ('ROM', ['.wsc'])),
]

SYSTEMS: Mapping[str, System] = MappingProxyType({s.id: s for s in _CATALOG})


def systems_by_id() -> Mapping[str, System]:
    """Return the read-only system catalog."""
    return SYSTEMS


def get_system(system_id: str, catalog: Mapping[str, System] = None) -> System:
    """Exact lookup of a system by id."""
    catalog = SYSTEMS if catalog is None else catalog
    try:
        return catalog[system_id]
    except KeyError:
        raise UnknownSystemError(f"unknown system: {system_id}") from None


def lookup_system(system_id: str, catalog: Mapping[str, System] = None) -> System:
    """Case-insensitive lookup of a system by id."""
    catalog = SYSTEMS if catalog is None else catalog
    wanted = system_id.lower()
    for key, system in catalog.items():
        if key.lower() == wanted:
            return system
    raise UnknownSystemError(f"unknown system: {system_id}")


def catalog_from_dict(data: Dict) -> Dict[str, System]:
    """Build a catalog from plain data, e.g. ``{"NES": {"folders": [...], "file_types": {...}}}``."""
    catalog = {}
    for system_id, row in data.items():
        file_types = row.get('file_types', {})
        catalog[system_id] = _system(
            system_id,
            row.get('name', system_id),
            row.get('folders', [system_id]),
            *file_types.items(),
        )
    return catalog
