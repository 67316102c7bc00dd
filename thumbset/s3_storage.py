"""
S3Storage - Path-addressed storage on S3/MinIO.
"""

import logging
from mimetypes import guess_type
from typing import Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from .config import S3Config
from .errors import StorageWriteError


class S3Storage:
    """
    Wrapper for S3/MinIO object operations.

    Storage paths are mapped to keys under the configured prefix.
    """

    def __init__(self, config: S3Config, logger: Optional[logging.Logger] = None):
        """
        Initialize S3 storage.

        Args:
            config: S3 configuration
            logger: Optional logger instance
        """
        self.config = config
        self.logger = logger or logging.getLogger(__name__)

        self._client = boto3.client(
            's3',
            endpoint_url=config.endpoint,
            aws_access_key_id=config.access_key,
            aws_secret_access_key=config.secret_key,
            region_name=config.region,
            config=Config(
                signature_version='s3v4',
                s3={'addressing_style': 'path'}
            ),
            verify=config.verify_ssl
        )

    @property
    def client(self):
        """Return the underlying boto3 client."""
        return self._client

    def key(self, path: str) -> str:
        """Normalize a storage path into an S3 object key."""
        prefix = (self.config.prefix or '').strip('/')
        path = path.lstrip('/')
        return f"{prefix}/{path}" if prefix else path

    def exists(self, path: str) -> bool:
        """Check if an object exists in S3."""
        try:
            self._client.head_object(Bucket=self.config.bucket, Key=self.key(path))
            return True
        except ClientError as e:
            if e.response['Error']['Code'] in ('404', 'NoSuchKey', 'NotFound'):
                return False
            raise

    def get(self, path: str) -> bytes:
        """Download an object from S3."""
        response = self._client.get_object(Bucket=self.config.bucket, Key=self.key(path))
        return response['Body'].read()

    def put(self, path: str, data: bytes, permission: Optional[int] = None) -> None:
        """
        Upload an object to S3.

        S3 has no POSIX modes, so permission bits are recorded as object
        metadata under 'mode'.
        """
        content_type = guess_type(path)[0] or 'application/octet-stream'
        params = {
            'Bucket': self.config.bucket,
            'Key': self.key(path),
            'Body': data,
            'ContentType': content_type,
        }
        if permission is not None:
            params['Metadata'] = {'mode': oct(permission)}

        try:
            self._client.put_object(**params)
        except (ClientError, BotoCoreError) as e:
            self.logger.error(f"Error uploading {params['Key']}: {e}")
            raise StorageWriteError(f"Cannot upload {params['Key']}: {e}") from e
        self.logger.debug(f"Uploaded {params['Key']} ({len(data)} bytes)")

    def delete(self, path: str) -> None:
        """Delete an object. S3 deletes of missing keys succeed."""
        self._client.delete_object(Bucket=self.config.bucket, Key=self.key(path))
        self.logger.debug(f"Deleted {self.key(path)}")
