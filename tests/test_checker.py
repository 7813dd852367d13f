from romindex.archive_cache import ArchiveIndexCache
from romindex.checker import FileChecker, file_exists


def test_real_file_exists(tmp_path, touch):
    path = touch(tmp_path / 'NES' / 'game.nes')
    checker = FileChecker()
    assert checker.exists(path)
    assert not checker.exists(str(tmp_path / 'NES' / 'other.nes'))


def test_entry_inside_archive(tmp_path, make_zip, counting_reader):
    archive = make_zip(tmp_path / 'archive.zip', ['inner/file.bin', 'top.bin'])
    checker = FileChecker(ArchiveIndexCache(reader=counting_reader))

    assert checker.exists(archive + '/inner/file.bin')
    assert checker.exists(archive + '/top.bin')
    assert not checker.exists(archive + '/file.bin')
    assert not checker.exists(archive + '/inner')
    assert counting_reader.calls == {archive: 1}


def test_unreadable_archive_counts_as_missing(tmp_path, touch):
    bad = touch(tmp_path / 'bad.zip', b'not a zip')
    checker = FileChecker()
    assert not checker.exists(bad + '/game.nes')
    assert not checker.exists(str(tmp_path / 'missing.zip') + '/game.nes')


def test_non_archive_missing_path():
    assert not file_exists('/definitely/not/here.nes')


def test_one_off_check(tmp_path, make_zip):
    archive = make_zip(tmp_path / 'pack.ZIP', ['a.nes'])
    assert file_exists(archive + '/a.nes')


def test_archive_is_split_at_first_zip_segment(tmp_path, make_zip):
    archive = make_zip(tmp_path / 'outer.zip', ['nested.zip/game.nes'])
    checker = FileChecker()

    assert checker.exists(archive + '/nested.zip/game.nes')
    assert not checker.exists(archive + '/nested.zip')
