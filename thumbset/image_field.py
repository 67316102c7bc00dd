"""
ImageField - Stores an uploaded image together with its thumbnails.

Tracks the currently stored original(s) so that replacing or removing the
image also cleans up the files derived from it.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from .config import FieldConfig
from .errors import UnsupportedOperation
from .image_processor import ImageProcessor, OperationCall
from .paths import OriginalReference, iter_originals, join_path, split_extension
from .thumbnail_set import StorageBackend, ThumbnailSet
from .upload import UploadedAsset


class ImageField:
    """
    An image upload slot holding one original (or a list for multi-file
    fields) and its thumbnails.
    """

    def __init__(
        self,
        storage: StorageBackend,
        config: Optional[FieldConfig] = None,
        processor: Optional[ImageProcessor] = None,
        original: OriginalReference = None,
        max_workers: int = 1,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize image field.

        Args:
            storage: Storage backend for originals and thumbnails
            config: Field configuration (default: FieldConfig())
            processor: Image processor shared with the thumbnail set
            original: Stored path(s) of the current original(s)
            max_workers: Thumbnails generated concurrently
            logger: Optional logger instance
        """
        self.storage = storage
        self.config = config or FieldConfig()
        self.processor = processor or ImageProcessor(logger=logger)
        self.original = original
        self.logger = logger or logging.getLogger(__name__)
        self.directory: Optional[str] = None
        self.calls: List[OperationCall] = []
        self.thumbnails = ThumbnailSet(
            storage,
            processor=self.processor,
            retain=self.config.retain,
            permission=self.config.storage_permission,
            max_workers=max_workers,
            logger=self.logger,
        )

    def default_directory(self) -> str:
        return self.config.default_directory

    def get_directory(self) -> str:
        return self.directory if self.directory is not None else self.default_directory()

    def move(self, directory: str) -> 'ImageField':
        """Store uploads under directory instead of the default."""
        self.directory = directory
        return self

    def thumbnail(
        self,
        name: Union[str, Mapping[str, Any]],
        width: Optional[int] = None,
        height: Optional[int] = None,
        action: Any = None
    ) -> 'ImageField':
        self.thumbnails.thumbnail(name, width, height, action)
        return self

    def call(self, name: str, *args: Any) -> 'ImageField':
        """Queue an image operation to run on the stored original after upload."""
        if name not in self.processor.operations:
            raise UnsupportedOperation(f"Unknown image operation {name!r}")
        self.calls.append(OperationCall(name, tuple(args)))
        return self

    def call_operations(self, target: str) -> str:
        """Replay queued operations on the stored file, saving after each step."""
        if not self.calls:
            return target

        extension = split_extension(target)[1]
        data = self.storage.get(target)
        for call in self.calls:
            self.logger.debug(f"Applying {call.name}{call.args} to {target}")
            data = self.processor.apply_call(data, call, extension)
            self.storage.put(target, data, self.config.storage_permission)
        return target

    def _store(self, asset: UploadedAsset, name: Optional[str]) -> str:
        # Fail on unknown actions before the original is written.
        self.thumbnails.planner.plan_all(self.thumbnails.specs)
        target = join_path(self.get_directory(), name or asset.filename)
        self.logger.debug(f"Storing original {target} ({asset.size} bytes)")
        self.storage.put(target, asset.data, self.config.storage_permission)
        if self.calls:
            self.call_operations(target)
            asset = UploadedAsset(self.storage.get(target), asset.filename)
        self.thumbnails.generate_all(asset, self.get_directory(), name=name)
        return target

    def upload(self, asset: UploadedAsset, name: Optional[str] = None) -> str:
        """
        Store an upload as the field's single original.

        The previous original and its thumbnails are removed afterwards
        unless retained or stored at the same path.

        Returns:
            Storage path of the new original
        """
        previous = iter_originals(self.original)
        target = self._store(asset, name)
        self._destroy_files([p for p in previous if p != target])
        self.original = target
        self.logger.info(f"Stored {target} with {len(self.thumbnails)} thumbnails")
        return target

    def upload_many(
        self,
        assets: Sequence[UploadedAsset],
        names: Optional[Sequence[str]] = None
    ) -> List[str]:
        """Store several uploads as the field's list of originals."""
        if names is not None and len(names) != len(assets):
            raise ValueError("names must match assets one to one")

        previous = iter_originals(self.original)
        targets = [
            self._store(asset, names[i] if names is not None else None)
            for i, asset in enumerate(assets)
        ]
        self._destroy_files([p for p in previous if p not in targets])
        self.original = targets
        self.logger.info(f"Stored {len(targets)} files with {len(self.thumbnails)} thumbnails each")
        return targets

    def destroy(self) -> None:
        """Remove the current original(s) and their thumbnails."""
        if self.config.retain:
            return
        self._destroy_files(iter_originals(self.original))
        self.original = [] if isinstance(self.original, (list, tuple)) else None

    def _destroy_files(self, originals: List[str]) -> None:
        if self.config.retain or not originals:
            return
        self.thumbnails.destroy_all(originals)
        for path in originals:
            if self.storage.exists(path):
                self.storage.delete(path)
                self.logger.debug(f"Deleted original: {path}")

    def thumbnail_paths(self) -> Dict[str, Union[str, List[str]]]:
        """
        Thumbnail paths of the current original(s), keyed by thumbnail name.

        Single-file fields map to a path, multi-file fields to a list.
        """
        originals = iter_originals(self.original)
        if not originals:
            return {}
        if isinstance(self.original, str):
            return self.thumbnails.paths_for(originals[0])
        return {
            name: [self.thumbnails.paths_for(o)[name] for o in originals]
            for name in self.thumbnails.names
        }
