import json
import os

import pytest

from romindex.cli import run_cli


@pytest.fixture
def games(tmp_path, touch, make_zip):
    root = tmp_path / 'games'
    touch(root / 'NES' / 'Contra.nes')
    touch(root / 'NES' / 'Dupes' / 'Contra.nes')
    make_zip(root / 'NES' / 'pack.zip', ['Zelda.nes', 'notes.txt'])
    touch(root / 'GBA' / 'Metroid.gba')
    return root


def _run(tmp_path, games, *args):
    return run_cli([
        '--games-folder', str(games),
        '--log-file', str(tmp_path / 'logs' / 'cli.log'),
        '--settings', str(tmp_path / 'no-settings.json'),
        *args,
    ])


def test_scan_single_system(tmp_path, games, capsys):
    nes = str(games / 'NES')
    assert _run(tmp_path, games, '--json', '--scan', 'nes', nes) == 0

    rows = json.loads(capsys.readouterr().out)
    assert sorted(r['path'] for r in rows) == sorted([
        os.path.join(nes, 'Contra.nes'),
        os.path.join(nes, 'Dupes', 'Contra.nes'),
        os.path.join(nes, 'pack.zip', 'Zelda.nes'),
    ])
    assert {r['system'] for r in rows} == {'NES'}


def test_scan_all_unique(tmp_path, games, capsys):
    assert _run(tmp_path, games, '--json', '--scan-all', '--unique') == 0

    rows = json.loads(capsys.readouterr().out)
    names = sorted(os.path.basename(r['path']) for r in rows)
    assert names == ['Contra.nes', 'Metroid.gba', 'Zelda.nes']


def test_scan_unknown_system(tmp_path, games, capsys):
    assert _run(tmp_path, games, '--scan', 'Dreamcast') == 1
    assert 'unknown system' in capsys.readouterr().err


def test_list_system_folders(tmp_path, games, capsys):
    assert _run(tmp_path, games, '--json', '--list', '') == 0

    payload = json.loads(capsys.readouterr().out)
    assert payload['up'] is None
    assert sorted(i['filename'] for i in payload['items']) == ['GBA', 'NES']


def test_list_invalid_path(tmp_path, games, capsys):
    assert _run(tmp_path, games, '--list', str(tmp_path)) == 1
    assert 'invalid path' in capsys.readouterr().err


def test_exists(tmp_path, games, capsys):
    inside = os.path.join(str(games / 'NES' / 'pack.zip'), 'Zelda.nes')
    assert _run(tmp_path, games, '--exists', inside) == 0
    assert capsys.readouterr().out.strip() == 'yes'

    assert _run(tmp_path, games, '--exists', inside + '.bak') == 1


def test_no_operation_prints_help(tmp_path, games, capsys):
    assert _run(tmp_path, games) == 1
    assert 'usage:' in capsys.readouterr().out


def test_list_text_output_shows_sizes(tmp_path, games, capsys):
    (games / 'NES' / 'Big.nes').write_bytes(b'x' * 1536)
    assert _run(tmp_path, games, '--list', str(games / 'NES')) == 0

    out = capsys.readouterr().out
    assert 'up: <systems>' in out
    assert '[dir]  Dupes' in out
    assert '1.5K  Big.nes' in out
    assert '3 B  Contra.nes' in out
