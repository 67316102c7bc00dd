"""
Derived path helpers.

Thumbnail paths are never stored anywhere; they are recomputed from the
original filename and the thumbnail name every time they are needed.
"""

from typing import Iterable, List, Sequence, Tuple, Union

OriginalReference = Union[None, str, Sequence[str]]


def split_extension(filename: str) -> Tuple[str, str]:
    """
    Split a filename at the last dot of its final path component.

    Returns:
        Tuple of (stem, extension). The stem keeps any directory part. The
        extension has no leading dot and is empty when the base name
        contains no dot, even if a directory name does.
    """
    head, sep, base = filename.rpartition('/')
    if '.' not in base:
        return filename, ''
    stem, ext = base.rsplit('.', 1)
    return head + sep + stem, ext


def derive_thumbnail_path(filename: str, thumbnail_name: str) -> str:
    """
    Build the storage path of a thumbnail from its original's filename.

    ``photos/cat.jpg`` with thumbnail ``small`` becomes ``photos/cat-small.jpg``.
    A filename without an extension keeps a trailing dot: ``cat`` becomes
    ``cat-small.``.
    """
    stem, ext = split_extension(filename)
    return f"{stem}-{thumbnail_name}.{ext}"


def iter_originals(originals: OriginalReference) -> List[str]:
    """Normalise a single filename or a list of filenames into a list."""
    if not originals:
        return []
    if isinstance(originals, str):
        return [originals]
    return [name for name in originals if name]


def thumbnail_paths(originals: OriginalReference, names: Iterable[str]) -> List[str]:
    """All derived paths for every original and thumbnail name."""
    names = list(names)
    return [
        derive_thumbnail_path(original, name)
        for original in iter_originals(originals)
        for name in names
    ]


def join_path(directory: str, path: str) -> str:
    """Join a storage directory and a relative path with a single slash."""
    directory = (directory or '').strip('/')
    path = path.lstrip('/')
    if not directory:
        return path
    return f"{directory}/{path}"
