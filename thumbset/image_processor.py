"""
ImageProcessor - Applies planned transforms to image bytes using Pillow.
"""

import io
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, Tuple

try:
    from PIL import Image, ImageFilter, ImageOps, UnidentifiedImageError
except ImportError:  # checked on first use, see _require_pillow
    Image = None

from .errors import DecodeError, EncodeError, MissingDependency, UnsupportedOperation
from .planner import BACKGROUND_COLOR, CUSTOM, RESIZE_CANVAS, Operation


@dataclass(frozen=True)
class OperationCall:
    """
    One step of a post-processing chain applied to a stored original.

    Attributes:
        name: Operation name, e.g. 'rotate'
        args: Positional arguments for the operation
    """
    name: str
    args: Tuple[Any, ...] = field(default_factory=tuple)


def _require_pillow() -> None:
    if Image is None:
        raise MissingDependency(
            "Image processing requires Pillow. Install it with 'pip install Pillow'."
        )


def _resample():
    return Image.Resampling.LANCZOS


def _convert_color_mode(img):
    """Convert image to RGB, flattening any transparency onto white."""
    if img.mode in ('RGBA', 'LA'):
        background = Image.new('RGB', img.size, BACKGROUND_COLOR)
        if img.mode == 'LA':
            img = img.convert('RGBA')
        background.paste(img, mask=img.split()[-1])
        return background
    elif img.mode == 'P':
        img = img.convert('RGBA')
        background = Image.new('RGB', img.size, BACKGROUND_COLOR)
        background.paste(img, mask=img.split()[-1])
        return background
    elif img.mode != 'RGB':
        return img.convert('RGB')
    return img


def _paste_centered(img, width: int, height: int):
    """Place img centered on a background canvas of exactly width x height."""
    canvas = Image.new('RGB', (width, height), BACKGROUND_COLOR)
    canvas.paste(_convert_color_mode(img), ((width - img.width) // 2, (height - img.height) // 2))
    return canvas


def resize_canvas(img, width: int, height: int):
    """
    Fit img inside width x height keeping its aspect ratio, then center it
    on a canvas of exactly width x height.
    """
    scale = min(width / img.width, height / img.height)
    new_size = (
        min(width, max(1, round(img.width * scale))),
        min(height, max(1, round(img.height * scale))),
    )
    resized = _convert_color_mode(img).resize(new_size, _resample())
    return _paste_centered(resized, width, height)


def crop_center(img, width: int, height: int, x: Optional[int] = None, y: Optional[int] = None):
    """
    Crop to width x height, centered unless an explicit x/y offset is given.

    A source smaller than the box in either dimension is enlarged first so
    the centered crop is filled completely.
    """
    if x is not None and y is not None:
        return img.crop((x, y, x + width, y + height))
    if img.width < width or img.height < height:
        scale = max(width / img.width, height / img.height)
        new_size = (
            max(width, round(img.width * scale)),
            max(height, round(img.height * scale)),
        )
        img = img.resize(new_size, _resample())
    left = (img.width - width) // 2
    top = (img.height - height) // 2
    return img.crop((left, top, left + width, top + height))


def fit(img, width: int, height: int):
    return ImageOps.fit(img, (width, height), _resample())


def contain(img, width: int, height: int):
    return ImageOps.contain(img, (width, height), _resample())


def stretch(img, width: int, height: int):
    return img.resize((width, height), _resample())


def rotate(img, angle: float):
    return img.rotate(angle, resample=Image.Resampling.BICUBIC, expand=True)


def blur(img, radius: float = 1):
    return img.filter(ImageFilter.GaussianBlur(radius))


# Thumbnail actions receive (image, width, height).
DEFAULT_ACTIONS: Dict[str, Callable] = {
    'crop': crop_center,
    'fit': fit,
    'contain': contain,
    'pad': resize_canvas,
    'stretch': stretch,
}

# Chain operations receive (image, *args).
DEFAULT_OPERATIONS: Dict[str, Callable] = {
    'resize': stretch,
    'fit': fit,
    'crop': crop_center,
    'contain': contain,
    'pad': resize_canvas,
    'rotate': rotate,
    'flip': lambda img: ImageOps.flip(img),
    'mirror': lambda img: ImageOps.mirror(img),
    'greyscale': lambda img: ImageOps.grayscale(img),
    'blur': blur,
    'sharpen': lambda img: img.filter(ImageFilter.SHARPEN),
}


class ImageProcessor:
    """
    Decodes image bytes, applies operations and re-encodes the result.

    Thumbnails are always encoded as JPEG. Chain operations re-encode in the
    format implied by the stored file's extension.
    """

    def __init__(self, quality: int = 85, logger: Optional[logging.Logger] = None):
        """
        Initialize image processor.

        Args:
            quality: JPEG quality for output (default: 85)
            logger: Optional logger instance
        """
        self.quality = quality
        self.logger = logger or logging.getLogger(__name__)
        self._actions = dict(DEFAULT_ACTIONS)
        self._operations = dict(DEFAULT_OPERATIONS)

    @property
    def custom_actions(self) -> frozenset:
        """Names usable as a thumbnail action besides the default resize."""
        return frozenset(self._actions)

    @property
    def operations(self) -> frozenset:
        """Names usable in a post-processing chain."""
        return frozenset(self._operations)

    def register_action(self, name: str, func: Callable) -> None:
        """Add or replace a thumbnail action taking (image, width, height)."""
        self._actions[name] = func

    def register_operation(self, name: str, func: Callable) -> None:
        """Add or replace a chain operation taking (image, *args)."""
        self._operations[name] = func

    def process(self, source: bytes, op: Operation) -> bytes:
        """
        Produce thumbnail bytes for a planned operation.

        Raises:
            MissingDependency: Pillow is not installed
            DecodeError: source is not a readable image
            UnsupportedOperation: op names an unregistered action
            EncodeError: JPEG encoding failed
        """
        img = self.decode(source)

        if op.kind == RESIZE_CANVAS:
            result = resize_canvas(img, op.width, op.height)
        elif op.kind == CUSTOM and op.name in self._actions:
            result = self._actions[op.name](img, op.width, op.height)
        else:
            raise UnsupportedOperation(f"Cannot process operation {op!r}")

        return self.encode(result, 'JPEG')

    def apply_call(self, source: bytes, call: OperationCall, extension: str) -> bytes:
        """Apply one chain operation and re-encode for the given extension."""
        handler = self._operations.get(call.name)
        if handler is None:
            raise UnsupportedOperation(f"Unknown image operation {call.name!r}")

        img = self.decode(source)
        try:
            result = handler(img, *call.args)
        except (TypeError, ValueError) as e:
            raise UnsupportedOperation(
                f"Invalid arguments for {call.name!r}: {call.args!r} ({e})"
            ) from e

        return self.encode(result, self.get_output_format(extension))

    def decode(self, source: bytes):
        _require_pillow()
        try:
            img = Image.open(io.BytesIO(source))
            img.load()
        except (UnidentifiedImageError, OSError, ValueError) as e:
            self.logger.error(f"Error decoding image: {e}")
            raise DecodeError(f"Cannot decode image: {e}") from e
        return ImageOps.exif_transpose(img)

    def encode(self, img, output_format: str) -> bytes:
        output = io.BytesIO()
        try:
            if output_format == 'JPEG':
                if img.mode not in ('RGB', 'L'):
                    img = _convert_color_mode(img)
                img.save(output, format='JPEG', quality=self.quality, optimize=True)
            elif output_format == 'PNG':
                img.save(output, format='PNG', optimize=True)
            else:
                img.save(output, format=output_format)
        except (OSError, ValueError, KeyError) as e:
            self.logger.error(f"Error encoding image as {output_format}: {e}")
            raise EncodeError(f"Cannot encode image as {output_format}: {e}") from e
        return output.getvalue()

    @staticmethod
    def get_output_format(extension: str) -> str:
        """Determine output format from a file extension (with or without dot)."""
        ext_lower = extension.lower().lstrip('.')

        if ext_lower == 'png':
            return 'PNG'
        elif ext_lower == 'gif':
            return 'GIF'
        elif ext_lower == 'webp':
            return 'WEBP'
        return 'JPEG'
