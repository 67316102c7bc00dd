"""
ThumbnailSet - The named thumbnails of one image field.

Generates every registered thumbnail for an upload and removes the
thumbnails of previous originals. Thumbnail paths are recomputed from the
original's path on each call; nothing records which files were written.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from .errors import StorageWriteError
from .generation_stats import GenerationStats
from .image_processor import ImageProcessor
from .local_storage import LocalStorage
from .paths import OriginalReference, derive_thumbnail_path, iter_originals, join_path
from .planner import Operation, TransformPlanner
from .s3_storage import S3Storage
from .thumbnail_spec import ThumbnailSpec, specs_from_mapping
from .upload import UploadedAsset

# Type alias for storage backends
StorageBackend = Union[S3Storage, LocalStorage]


class ThumbnailSet:
    """
    Registry of thumbnail specs plus the generate/destroy passes over them.
    """

    def __init__(
        self,
        storage: StorageBackend,
        processor: Optional[ImageProcessor] = None,
        retain: bool = False,
        permission: Optional[int] = None,
        max_workers: int = 1,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize thumbnail set.

        Args:
            storage: Storage backend thumbnails are written to
            processor: Image processor (default: a new ImageProcessor)
            retain: If True, never delete thumbnails of previous originals
            permission: Permission bits for written thumbnails, None for
                the backend default
            max_workers: Thumbnails generated concurrently (1 = sequential)
            logger: Optional logger instance
        """
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        self.storage = storage
        self.processor = processor or ImageProcessor(logger=logger)
        self.retain = retain
        self.permission = permission
        self.max_workers = max_workers
        self.logger = logger or logging.getLogger(__name__)
        self._specs: Dict[str, ThumbnailSpec] = {}

    def register(self, name: str, width: int, height: int, action: Any = None) -> ThumbnailSpec:
        """Add or replace the thumbnail called name."""
        spec = ThumbnailSpec.create(name, width, height, action)
        self._specs[name] = spec
        return spec

    def thumbnail(
        self,
        name: Union[str, Mapping[str, Any]],
        width: Optional[int] = None,
        height: Optional[int] = None,
        action: Any = None
    ) -> 'ThumbnailSet':
        """
        Define thumbnails fluently.

        Accepts either a mapping ``{name: (width, height[, action])}`` or a
        single ``name, width, height``. Mapping entries with fewer than two
        numeric components are skipped; a single definition without both
        dimensions is ignored.
        """
        if isinstance(name, Mapping):
            self._specs.update(specs_from_mapping(name))
        elif width is not None and height is not None:
            self.register(name, width, height, action)
        return self

    @property
    def specs(self) -> List[ThumbnailSpec]:
        return list(self._specs.values())

    @property
    def names(self) -> List[str]:
        return list(self._specs)

    def get(self, name: str) -> Optional[ThumbnailSpec]:
        return self._specs.get(name)

    def __len__(self) -> int:
        return len(self._specs)

    def __contains__(self, name: object) -> bool:
        return name in self._specs

    @property
    def planner(self) -> TransformPlanner:
        return TransformPlanner(self.processor.custom_actions)

    def paths_for(self, original: str) -> Dict[str, str]:
        """Map each thumbnail name to its path for a stored original."""
        return {name: derive_thumbnail_path(original, name) for name in self._specs}

    def generate_all(
        self,
        upload: UploadedAsset,
        directory: str = '',
        previous: OriginalReference = None,
        name: Optional[str] = None
    ) -> GenerationStats:
        """
        Write every registered thumbnail for an upload.

        Every spec is planned before anything is written. The first failure
        aborts the call; thumbnails already written stay in storage. Once all
        thumbnails are written, those of the previous original(s) are
        destroyed unless retained.

        Args:
            upload: The uploaded image
            directory: Storage directory of the original
            previous: Stored path(s) of the original(s) being replaced
            name: Stored filename of the original (default: upload.filename)

        Returns:
            GenerationStats with written and deleted paths
        """
        original = join_path(directory, name or upload.filename)
        plans = self.planner.plan_all(self.specs)
        stats = GenerationStats(total_to_process=len(plans))

        if self.max_workers == 1 or len(plans) < 2:
            for spec, op in plans:
                stats.record_write(*self._generate_one(upload.data, original, spec, op))
        else:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                futures = [
                    executor.submit(self._generate_one, upload.data, original, spec, op)
                    for spec, op in plans
                ]
                try:
                    for future in futures:
                        stats.record_write(*future.result())
                except Exception:
                    for future in futures:
                        future.cancel()
                    raise

        self.logger.info(
            f"Generated {stats.written} thumbnails for {original} "
            f"({stats.bytes_written} bytes, {stats.elapsed_seconds:.2f}s)"
        )

        # Re-uploading under the same name derives the same paths.
        stale = [p for p in iter_originals(previous) if p != original]
        self.destroy_all(stale, stats)
        return stats

    def _generate_one(
        self,
        source: bytes,
        original: str,
        spec: ThumbnailSpec,
        op: Operation
    ) -> Tuple[str, int]:
        data = self.processor.process(source, op)
        path = derive_thumbnail_path(original, spec.name)

        self.logger.debug(f"Storing thumbnail {spec.name!r}: {path}")
        try:
            self.storage.put(path, data, self.permission)
        except StorageWriteError:
            raise
        except Exception as e:
            self.logger.error(f"Error storing {path}: {e}")
            raise StorageWriteError(f"Cannot store {path}: {e}") from e
        return path, len(data)

    def destroy_all(
        self,
        originals: OriginalReference,
        stats: Optional[GenerationStats] = None
    ) -> int:
        """
        Delete the thumbnails of the given original(s).

        Missing thumbnails are skipped. Does nothing when retained.

        Returns:
            Number of files deleted
        """
        if self.retain:
            self.logger.debug("Retain is set, keeping previous thumbnails")
            return 0

        deleted = 0
        for original in iter_originals(originals):
            for path in self.paths_for(original).values():
                if not self.storage.exists(path):
                    continue
                self.storage.delete(path)
                deleted += 1
                if stats is not None:
                    stats.record_delete(path)
                self.logger.debug(f"Deleted thumbnail: {path}")

        if deleted:
            self.logger.info(f"Deleted {deleted} previous thumbnails")
        return deleted
