"""
Thumbnail lifecycle management for uploaded images.

An image field stores an uploaded original, writes each registered
thumbnail next to it as ``<stem>-<name>.<ext>`` and removes those files
again when the original is replaced or deleted. Thumbnail paths are always
recomputed from the original's path, so no index of generated files is kept.

Supports both S3 and local filesystem storage.
"""

__version__ = "1.0.0"

from .errors import (
    ThumbsetError,
    DecodeError,
    EncodeError,
    UnsupportedOperation,
    StorageWriteError,
    MissingDependency,
)
from .config import FieldConfig, S3Config, LocalConfig
from .paths import derive_thumbnail_path, split_extension, thumbnail_paths
from .thumbnail_spec import Action, ThumbnailSpec
from .planner import Operation, TransformPlanner
from .image_processor import ImageProcessor, OperationCall
from .local_storage import LocalStorage
from .s3_storage import S3Storage
from .upload import UploadedAsset
from .generation_stats import GenerationStats
from .thumbnail_set import ThumbnailSet
from .image_field import ImageField

__all__ = [
    "ThumbsetError",
    "DecodeError",
    "EncodeError",
    "UnsupportedOperation",
    "StorageWriteError",
    "MissingDependency",
    "FieldConfig",
    "S3Config",
    "LocalConfig",
    "derive_thumbnail_path",
    "split_extension",
    "thumbnail_paths",
    "Action",
    "ThumbnailSpec",
    "Operation",
    "TransformPlanner",
    "ImageProcessor",
    "OperationCall",
    "LocalStorage",
    "S3Storage",
    "UploadedAsset",
    "GenerationStats",
    "ThumbnailSet",
    "ImageField",
]
