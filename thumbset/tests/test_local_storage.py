"""Tests for LocalStorage class."""

import os
import stat

import pytest

from thumbset.config import LocalConfig
from thumbset.errors import StorageWriteError
from thumbset.local_storage import LocalStorage


class TestLocalStorage:
    """Tests for LocalStorage class."""

    def test_put_creates_directories(self, local_storage, storage_root):
        local_storage.put('images/2024/cat.jpg', b'data')

        assert (storage_root / 'images' / '2024' / 'cat.jpg').read_bytes() == b'data'

    def test_exists_and_get(self, local_storage):
        local_storage.put('a.jpg', b'abc')

        assert local_storage.exists('a.jpg') is True
        assert local_storage.exists('b.jpg') is False
        assert local_storage.get('a.jpg') == b'abc'

    def test_exists_ignores_directories(self, local_storage):
        local_storage.put('images/a.jpg', b'abc')

        assert local_storage.exists('images') is False

    def test_put_applies_permission(self, local_storage, storage_root):
        local_storage.put('a.jpg', b'abc', permission=0o640)

        assert stat.S_IMODE(os.stat(storage_root / 'a.jpg').st_mode) == 0o640

    def test_put_failure(self, local_storage, storage_root):
        (storage_root / 'blocker').write_bytes(b'')

        with pytest.raises(StorageWriteError):
            local_storage.put('blocker/a.jpg', b'abc')

    def test_delete(self, local_storage):
        local_storage.put('a.jpg', b'abc')

        local_storage.delete('a.jpg')

        assert local_storage.exists('a.jpg') is False

    def test_delete_missing_is_not_an_error(self, local_storage):
        local_storage.delete('never/existed.jpg')

    def test_rejects_paths_outside_root(self, local_storage):
        with pytest.raises(ValueError):
            local_storage.put('../outside.jpg', b'abc')

    def test_leading_slash_is_relative(self, tmp_path):
        storage = LocalStorage(LocalConfig(root_path=str(tmp_path)))

        assert storage.full_path('/a/b.jpg') == os.path.join(str(tmp_path), 'a', 'b.jpg')
