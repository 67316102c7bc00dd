"""
Pytest fixtures for thumbset tests.
"""

import io
import os

import pytest


def make_image_bytes(size=(100, 100), color='red', mode='RGB', fmt='JPEG'):
    from PIL import Image

    img = Image.new(mode, size, color=color)
    buffer = io.BytesIO()
    img.save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture
def s3_config():
    """Fixture providing S3 configuration."""
    from thumbset.config import S3Config

    return S3Config(
        endpoint='https://test-endpoint.example.com:9000',
        bucket='test-bucket',
        prefix='attachments',
        access_key='test-access-key',
        secret_key='test-secret-key',
        region='us-east-1',
    )


@pytest.fixture
def mock_boto3_client(mocker):
    """Fixture providing a mocked boto3 client."""
    mock_client = mocker.MagicMock()
    mocker.patch('thumbset.s3_storage.boto3.client', return_value=mock_client)
    return mock_client


@pytest.fixture
def storage_root(tmp_path):
    """Fixture providing an empty local storage root."""
    root = tmp_path / 'storage'
    root.mkdir()
    return root


@pytest.fixture
def local_storage(storage_root):
    """Fixture providing LocalStorage on a temporary directory."""
    from thumbset.config import LocalConfig
    from thumbset.local_storage import LocalStorage

    return LocalStorage(LocalConfig(root_path=str(storage_root)))


@pytest.fixture
def mock_storage():
    """Fixture providing a mock storage backend where nothing exists."""
    from unittest.mock import MagicMock

    mock = MagicMock()
    mock.exists.return_value = False
    mock.put.return_value = None
    return mock


@pytest.fixture
def sample_image_bytes():
    """Fixture providing sample JPEG image bytes (100x100 red)."""
    return make_image_bytes()


@pytest.fixture
def sample_png_bytes():
    """Fixture providing sample PNG image bytes with transparency."""
    return make_image_bytes(color=(255, 0, 0, 128), mode='RGBA', fmt='PNG')


@pytest.fixture
def wide_image_bytes():
    """Fixture providing a 400x200 red JPEG."""
    return make_image_bytes(size=(400, 200))


@pytest.fixture
def upload(sample_image_bytes):
    """Fixture providing an uploaded JPEG called cat.jpg."""
    from thumbset.upload import UploadedAsset

    return UploadedAsset(data=sample_image_bytes, filename='cat.jpg')


@pytest.fixture
def logger():
    """Fixture providing a logger."""
    import logging
    return logging.getLogger('test')


@pytest.fixture
def make_image():
    """Fixture providing a factory for encoded test images."""
    return make_image_bytes


def list_files(root):
    return sorted(
        os.path.relpath(os.path.join(dirpath, name), root).replace(os.sep, '/')
        for dirpath, _, names in os.walk(root)
        for name in names
    )


@pytest.fixture
def stored_files(storage_root):
    """Fixture returning a callable that lists files under the storage root."""
    return lambda: list_files(storage_root)
