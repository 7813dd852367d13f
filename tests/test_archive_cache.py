import threading

import pytest

from romindex.archive_cache import ArchiveIndexCache, list_zip
from romindex.errors import ArchiveReadError


def test_list_zip_skips_directory_entries(tmp_path, make_zip):
    archive = make_zip(tmp_path / 'pack.zip', ['a.nes', 'sub/', 'sub/b.nes'])
    assert list_zip(archive) == ['a.nes', 'sub/b.nes']


def test_list_zip_corrupt_archive(tmp_path):
    bad = tmp_path / 'bad.zip'
    bad.write_bytes(b'this is not a zip file')
    with pytest.raises(ArchiveReadError) as exc:
        list_zip(str(bad))
    assert exc.value.path == str(bad)


def test_list_zip_missing_archive(tmp_path):
    with pytest.raises(ArchiveReadError):
        list_zip(str(tmp_path / 'missing.zip'))


def test_cache_reads_each_archive_once(tmp_path, make_zip, counting_reader):
    archive = make_zip(tmp_path / 'pack.zip', ['a.nes', 'b.nes'])
    cache = ArchiveIndexCache(reader=counting_reader)

    first = cache.list(archive)
    second = cache.list(archive)

    assert first == second == ('a.nes', 'b.nes')
    assert counting_reader.calls[archive] == 1
    assert archive in cache
    assert len(cache) == 1


def test_concurrent_first_lookups_read_once(tmp_path, make_zip, counting_reader):
    archive = make_zip(tmp_path / 'pack.zip', ['a.nes'])
    cache = ArchiveIndexCache(reader=counting_reader)
    results = []

    def worker():
        results.append(cache.list(archive))

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert results == [('a.nes',)] * 8
    assert counting_reader.calls[archive] == 1


def test_failed_read_is_not_cached():
    attempts = []

    def flaky_reader(path):
        attempts.append(path)
        if len(attempts) == 1:
            raise ArchiveReadError(path, 'temporary')
        return ['a.nes']

    cache = ArchiveIndexCache(reader=flaky_reader)
    with pytest.raises(ArchiveReadError):
        cache.list('/roms/pack.zip')
    assert cache.get('/roms/pack.zip') is None

    assert cache.list('/roms/pack.zip') == ('a.nes',)
    assert len(attempts) == 2


def test_clear_forces_reread(tmp_path, make_zip, counting_reader):
    archive = make_zip(tmp_path / 'pack.zip', ['a.nes'])
    cache = ArchiveIndexCache(reader=counting_reader)
    cache.list(archive)
    cache.clear()
    assert len(cache) == 0
    cache.list(archive)
    assert counting_reader.calls[archive] == 2


def test_contains(tmp_path, make_zip):
    archive = make_zip(tmp_path / 'pack.zip', ['inner/file.bin'])
    cache = ArchiveIndexCache()
    assert cache.contains(archive, 'inner/file.bin')
    assert not cache.contains(archive, 'file.bin')
