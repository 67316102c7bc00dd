"""
GenerationStats - Statistics for one generate/destroy call.
"""

import time
from dataclasses import dataclass, field
from typing import List


@dataclass
class GenerationStats:
    """
    Statistics for a thumbnail generation call.
    
    Attributes:
        total_to_process: Number of thumbnails planned
        written: Thumbnails successfully stored
        deleted: Previous thumbnails removed
        bytes_written: Total bytes of thumbnails stored
        start_time: Start timestamp
        written_paths: Storage paths written, in completion order
        deleted_paths: Storage paths deleted
    """
    total_to_process: int = 0
    written: int = 0
    deleted: int = 0
    bytes_written: int = 0
    start_time: float = field(default_factory=time.time)
    written_paths: List[str] = field(default_factory=list)
    deleted_paths: List[str] = field(default_factory=list)
    
    def record_write(self, path: str, size: int) -> None:
        self.written += 1
        self.bytes_written += size
        self.written_paths.append(path)

    def record_delete(self, path: str) -> None:
        self.deleted += 1
        self.deleted_paths.append(path)

    @property
    def elapsed_seconds(self) -> float:
        """Elapsed time in seconds."""
        return time.time() - self.start_time
    
    @property
    def rate_per_second(self) -> float:
        """Thumbnails written per second."""
        if self.elapsed_seconds > 0:
            return self.written / self.elapsed_seconds
        return 0.0
    
    @property
    def remaining_count(self) -> int:
        """Planned thumbnails not yet written."""
        return self.total_to_process - self.written
