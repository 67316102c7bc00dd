"""
Exception types raised while generating and cleaning up thumbnails.
"""


class ThumbsetError(Exception):
    """Base class for all thumbset errors."""


class DecodeError(ThumbsetError):
    """Source bytes could not be decoded as an image."""


class EncodeError(ThumbsetError):
    """The processed image could not be encoded to the output format."""


class UnsupportedOperation(ThumbsetError):
    """A thumbnail action or chain operation has no registered handler."""


class StorageWriteError(ThumbsetError):
    """The storage backend failed to persist data."""


class MissingDependency(ThumbsetError):
    """Image processing was requested but Pillow is not installed."""
