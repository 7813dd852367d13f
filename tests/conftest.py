"""Shared fixtures: real directory trees, zip files and symlinks under tmp_path."""

import os
import zipfile

import pytest

from romindex.monitor import shutdown_runtime_monitor
from romindex.systems import catalog_from_dict


@pytest.fixture(autouse=True)
def _reset_monitor():
    yield
    shutdown_runtime_monitor()


@pytest.fixture
def touch():
    def _touch(path, data=b'rom'):
        os.makedirs(os.path.dirname(str(path)), exist_ok=True)
        with open(path, 'wb') as f:
            f.write(data)
        return str(path)
    return _touch


@pytest.fixture
def make_zip():
    def _make_zip(path, names):
        os.makedirs(os.path.dirname(str(path)), exist_ok=True)
        with zipfile.ZipFile(path, 'w') as zf:
            for name in names:
                if name.endswith('/'):
                    zf.writestr(zipfile.ZipInfo(name), b'')
                else:
                    zf.writestr(name, b'data')
        return str(path)
    return _make_zip


@pytest.fixture
def ext_catalog():
    return catalog_from_dict({
        'Test': {'folders': ['TEST'], 'file_types': {'ROM': ['.ext']}},
    })


class CountingReader:
    """Archive reader probe that counts reads per archive."""

    def __init__(self):
        from romindex.archive_cache import list_zip
        self._list_zip = list_zip
        self.calls = {}

    def __call__(self, path):
        self.calls[path] = self.calls.get(path, 0) + 1
        return self._list_zip(path)

    @property
    def total(self):
        return sum(self.calls.values())


@pytest.fixture
def counting_reader():
    return CountingReader()
