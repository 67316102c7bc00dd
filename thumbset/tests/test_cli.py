"""Tests for CLI module."""

import pytest
from botocore.exceptions import ClientError

from thumbset.cli import create_parser, main, parse_call


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ('THUMBSET_IMAGE_DIRECTORY', 'THUMBSET_STORAGE_PERMISSION', 'THUMBSET_RETAIN'):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def image_file(tmp_path, sample_image_bytes):
    path = tmp_path / 'photo.jpg'
    path.write_bytes(sample_image_bytes)
    return path


class TestCreateParser:
    """Tests for argument parser creation."""

    def test_parser_created(self):
        parser = create_parser()
        assert parser is not None

    def test_generate_command(self):
        parser = create_parser()
        args = parser.parse_args([
            'generate', 'photo.jpg',
            '--thumb', 'small=100x80', '--thumb', 'sq=50x50:fit',
            '--previous', 'images/a.jpg', 'images/b.jpg',
            '--workers', '4',
        ])

        assert args.command == 'generate'
        assert args.image == 'photo.jpg'
        assert args.thumb == ['small=100x80', 'sq=50x50:fit']
        assert args.previous == ['images/a.jpg', 'images/b.jpg']
        assert args.workers == 4
        assert args.retain is False

    def test_destroy_command(self):
        parser = create_parser()
        args = parser.parse_args(['destroy', '-o', 'images/a.jpg', '-t', 'small=1x1', '--retain'])

        assert args.command == 'destroy'
        assert args.original == ['images/a.jpg']
        assert args.retain is True


class TestParseCall:
    """Tests for parse_call."""

    def test_without_args(self):
        assert parse_call('flip') == ('flip', [])

    def test_numeric_args(self):
        assert parse_call('crop:10,20,1.5') == ('crop', [10, 20, 1.5])

    def test_invalid_number(self):
        with pytest.raises(ValueError):
            parse_call('rotate:left')


class TestMain:
    """Tests for main entry point."""

    def test_no_command(self):
        result = main([])
        assert result == 1

    def test_paths(self, capsys):
        result = main(['paths', '-o', 'images/a.jpg', 'images/b', '-t', 'small=10x10'])

        assert result == 0
        assert capsys.readouterr().out.split() == ['images/a-small.jpg', 'images/b-small.']

    def test_paths_invalid_thumb(self):
        assert main(['paths', '-o', 'a.jpg', '-t', 'small']) == 1

    def test_generate_local(self, image_file, storage_root, capsys):
        result = main([
            'generate', str(image_file),
            '--local-root', str(storage_root),
            '--thumb', 'small=20x20',
            '--call', 'rotate:90',
        ])

        assert result == 0
        assert (storage_root / 'images' / 'photo.jpg').exists()
        assert (storage_root / 'images' / 'photo-small.jpg').exists()
        assert capsys.readouterr().out.split() == ['images/photo.jpg', 'images/photo-small.jpg']

    def test_generate_replaces_previous(self, image_file, storage_root):
        main(['generate', str(image_file), '--local-root', str(storage_root),
              '--thumb', 'small=20x20', '--name', 'old.jpg'])

        result = main(['generate', str(image_file), '--local-root', str(storage_root),
                       '--thumb', 'small=20x20', '--previous', 'images/old.jpg'])

        assert result == 0
        assert not (storage_root / 'images' / 'old.jpg').exists()
        assert not (storage_root / 'images' / 'old-small.jpg').exists()

    def test_generate_unknown_action(self, image_file, storage_root):
        result = main(['generate', str(image_file), '--local-root', str(storage_root),
                       '--thumb', 'small=20x20:rotate90'])

        assert result == 1
        assert not (storage_root / 'images' / 'photo-small.jpg').exists()
        assert not (storage_root / 'images' / 'photo.jpg').exists()

    def test_generate_missing_image(self, tmp_path, storage_root):
        result = main(['generate', str(tmp_path / 'nope.jpg'), '--local-root', str(storage_root)])

        assert result == 1

    def test_generate_invalid_local_root(self, image_file, tmp_path):
        result = main(['generate', str(image_file), '--local-root', str(tmp_path / 'missing')])

        assert result == 1

    def test_destroy_local(self, image_file, storage_root):
        main(['generate', str(image_file), '--local-root', str(storage_root), '--thumb', 'small=20x20'])

        result = main(['destroy', '--local-root', str(storage_root),
                       '-o', 'images/photo.jpg', '-t', 'small=20x20'])

        assert result == 0
        assert not (storage_root / 'images' / 'photo-small.jpg').exists()
        assert (storage_root / 'images' / 'photo.jpg').exists()

    def test_destroy_honors_retain_from_environment(self, storage_root, monkeypatch, sample_image_bytes):
        (storage_root / 'images').mkdir()
        (storage_root / 'images' / 'cat-small.jpg').write_bytes(sample_image_bytes)
        monkeypatch.setenv('THUMBSET_RETAIN', '1')

        result = main(['destroy', '--local-root', str(storage_root),
                       '--original', 'images/cat.jpg', '--thumb', 'small=10x10'])

        assert result == 0
        assert (storage_root / 'images' / 'cat-small.jpg').exists()

    def test_generate_name_outside_root(self, image_file, storage_root, tmp_path):
        result = main(['generate', str(image_file), '--local-root', str(storage_root),
                       '--name', '../../evil.jpg'])

        assert result == 1
        assert not (tmp_path / 'evil.jpg').exists()

    def test_destroy_s3_access_denied(self, mock_boto3_client):
        mock_boto3_client.head_object.side_effect = ClientError(
            {'Error': {'Code': '403', 'Message': 'Forbidden'}}, 'HeadObject'
        )

        result = main(['destroy', '--s3-endpoint', 'http://localhost:9000',
                       '--s3-bucket', 'media', '--s3-access-key', 'key',
                       '--s3-secret-key', 'secret',
                       '-o', 'images/cat.jpg', '-t', 'small=10x10'])

        assert result == 1
