"""
LocalStorage - Path-addressed storage on the local filesystem.
"""

import logging
import os
from typing import Optional

from .config import LocalConfig
from .errors import StorageWriteError


class LocalStorage:
    """
    Stores files under a root directory.

    Paths are relative, '/'-separated and must stay inside the root.
    """

    def __init__(self, config: LocalConfig, logger: Optional[logging.Logger] = None):
        """
        Initialize local storage.

        Args:
            config: Local configuration
            logger: Optional logger instance
        """
        self.config = config
        self.root = os.path.abspath(config.root_path)
        self.logger = logger or logging.getLogger(__name__)

    def full_path(self, path: str) -> str:
        """Resolve a storage path to an absolute filesystem path."""
        full = os.path.abspath(os.path.join(self.root, path.lstrip('/')))
        if os.path.commonpath([self.root, full]) != self.root:
            raise ValueError(f"Path escapes storage root: {path}")
        return full

    def exists(self, path: str) -> bool:
        return os.path.isfile(self.full_path(path))

    def get(self, path: str) -> bytes:
        with open(self.full_path(path), 'rb') as f:
            return f.read()

    def put(self, path: str, data: bytes, permission: Optional[int] = None) -> None:
        """Write data to path, creating parent directories as needed."""
        full = self.full_path(path)
        try:
            os.makedirs(os.path.dirname(full), exist_ok=True)
            with open(full, 'wb') as f:
                f.write(data)
            if permission is not None:
                os.chmod(full, permission)
        except OSError as e:
            self.logger.error(f"Error writing {path}: {e}")
            raise StorageWriteError(f"Cannot write {path}: {e}") from e
        self.logger.debug(f"Wrote {path} ({len(data)} bytes)")

    def delete(self, path: str) -> None:
        """Delete path. A missing file is not an error."""
        try:
            os.remove(self.full_path(path))
        except FileNotFoundError:
            return
        self.logger.debug(f"Deleted {path}")
