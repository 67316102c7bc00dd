"""
Configuration for image fields and storage backends.

Values are read from the environment with ``from_env`` and can be
overridden by the CLI.
"""

import os
from dataclasses import dataclass
from typing import List, Optional

TRUE_VALUES = {'yes', 'true', 't', 'y', '1', 'on'}
FALSE_VALUES = {'no', 'false', 'f', 'n', '0', 'off', ''}


def str2bool(value: Optional[str], default: bool = False) -> bool:
    """Convert common environment string values into a boolean."""
    if value is None:
        return default
    lowered = value.strip().lower()
    if lowered in TRUE_VALUES:
        return True
    if lowered in FALSE_VALUES:
        return False
    raise ValueError(f"Invalid boolean value: {value!r}")


def parse_permission(value: Optional[str]) -> Optional[int]:
    """Parse octal permission bits such as '0644' or '0o644'."""
    if value is None or value.strip() == '':
        return None
    try:
        permission = int(value.strip(), 8)
    except ValueError as e:
        raise ValueError(f"Invalid storage permission: {value!r}") from e
    if not 0 <= permission <= 0o7777:
        raise ValueError(f"Storage permission out of range: {value!r}")
    return permission


@dataclass
class FieldConfig:
    """
    Settings for one image field.

    Attributes:
        default_directory: Base directory uploads are stored under
        storage_permission: Permission bits applied to written files, or None
            to keep the backend default
        retain: Keep previous originals and thumbnails instead of deleting them
    """
    default_directory: str = 'images'
    storage_permission: Optional[int] = None
    retain: bool = False

    @classmethod
    def from_env(cls) -> 'FieldConfig':
        return cls(
            default_directory=os.getenv('THUMBSET_IMAGE_DIRECTORY', 'images'),
            storage_permission=parse_permission(os.getenv('THUMBSET_STORAGE_PERMISSION')),
            retain=str2bool(os.getenv('THUMBSET_RETAIN'), default=False),
        )


@dataclass
class S3Config:
    """
    Connection settings for S3/MinIO storage.

    Attributes:
        endpoint: S3 endpoint URL
        bucket: Bucket name
        prefix: Key prefix all paths are stored under
        access_key: Access key id
        secret_key: Secret access key
        region: Region name
        verify_ssl: Verify TLS certificates
    """
    endpoint: Optional[str] = None
    bucket: Optional[str] = None
    prefix: str = ''
    access_key: Optional[str] = None
    secret_key: Optional[str] = None
    region: Optional[str] = None
    verify_ssl: bool = True

    @classmethod
    def from_env(cls) -> 'S3Config':
        return cls(
            endpoint=os.getenv('S3_ENDPOINT'),
            bucket=os.getenv('S3_BUCKET'),
            prefix=os.getenv('S3_PREFIX', ''),
            access_key=os.getenv('S3_ACCESS_KEY'),
            secret_key=os.getenv('S3_SECRET_KEY'),
            region=os.getenv('S3_REGION'),
            verify_ssl=str2bool(os.getenv('S3_VERIFY_SSL'), default=True),
        )

    def validate(self) -> List[str]:
        """Return a list of configuration problems (empty when valid)."""
        errors = []
        if not self.endpoint:
            errors.append("S3 endpoint is not set (S3_ENDPOINT)")
        if not self.bucket:
            errors.append("S3 bucket is not set (S3_BUCKET)")
        if not self.access_key:
            errors.append("S3 access key is not set (S3_ACCESS_KEY)")
        if not self.secret_key:
            errors.append("S3 secret key is not set (S3_SECRET_KEY)")
        return errors


@dataclass
class LocalConfig:
    """
    Settings for local filesystem storage.

    Attributes:
        root_path: Directory all storage paths are relative to
    """
    root_path: str

    def validate(self) -> List[str]:
        errors = []
        if not self.root_path:
            errors.append("Local root path is not set")
        elif not os.path.isdir(self.root_path):
            errors.append(f"Local root path does not exist: {self.root_path}")
        return errors
