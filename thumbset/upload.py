"""
UploadedAsset - Bytes and filename of one uploaded image.
"""

import os
from dataclasses import dataclass
from typing import Optional

from .paths import split_extension


@dataclass
class UploadedAsset:
    """
    An uploaded file, alive for one upload-and-process call.

    Attributes:
        data: Raw file bytes
        filename: Original filename as uploaded
    """
    data: bytes
    filename: str

    @property
    def extension(self) -> str:
        """Extension without the dot, empty if there is none."""
        return split_extension(self.filename)[1]

    @property
    def size(self) -> int:
        return len(self.data)

    @classmethod
    def from_path(cls, path: str, filename: Optional[str] = None) -> 'UploadedAsset':
        """Read an upload from a real path on disk."""
        with open(path, 'rb') as f:
            data = f.read()
        return cls(data=data, filename=filename or os.path.basename(path))
