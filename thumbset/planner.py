"""
TransformPlanner - Decides which pixel operation produces each thumbnail.
"""

from dataclasses import dataclass
from typing import FrozenSet, Iterable, List, Optional, Tuple

from .errors import UnsupportedOperation
from .thumbnail_spec import ThumbnailSpec

RESIZE_CANVAS = 'resize_canvas'
CUSTOM = 'custom'

# Canvas fill for the default resize. JPEG output has no alpha, so white.
BACKGROUND_COLOR = (255, 255, 255)


@dataclass(frozen=True)
class Operation:
    """
    A planned transform.

    Attributes:
        kind: RESIZE_CANVAS or CUSTOM
        width: Target width
        height: Target height
        name: Custom action name (CUSTOM only)
    """
    kind: str
    width: int
    height: int
    name: Optional[str] = None


class TransformPlanner:
    """
    Maps thumbnail specs to operations.

    Custom action names are validated against the names the image processor
    can execute, so unknown actions fail before anything is written.
    """

    def __init__(self, custom_actions: Iterable[str] = ()):
        self.custom_actions: FrozenSet[str] = frozenset(custom_actions)

    def plan(self, spec: ThumbnailSpec) -> Operation:
        if spec.action.is_resize:
            return Operation(RESIZE_CANVAS, spec.width, spec.height)

        if spec.action.name not in self.custom_actions:
            raise UnsupportedOperation(
                f"Thumbnail {spec.name!r} uses unknown action {spec.action.name!r}"
            )
        return Operation(CUSTOM, spec.width, spec.height, name=spec.action.name)

    def plan_all(self, specs: Iterable[ThumbnailSpec]) -> List[Tuple[ThumbnailSpec, Operation]]:
        """Plan every spec, failing on the first unsupported one."""
        return [(spec, self.plan(spec)) for spec in specs]
