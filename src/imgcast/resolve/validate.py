"""Image validity predicate shared by every resolution strategy."""

from __future__ import annotations

from imgcast.config import IMAGE_EXTENSIONS
from imgcast.models import ResourceHandle, StorageEntry


def is_image_extension(extension: str | None) -> bool:
    """Return ``True`` if *extension* (any case, no dot) names an image type."""
    if not extension:
        return False
    return extension.lower() in IMAGE_EXTENSIONS


def is_valid_entry(entry: StorageEntry | None) -> bool:
    """A candidate is valid iff it exists, is a leaf, and has an image extension."""
    return entry is not None and not entry.is_dir and is_image_extension(entry.extension)


def to_handle(entry: StorageEntry | None) -> ResourceHandle | None:
    """Return a :class:`ResourceHandle` for a valid *entry*, else ``None``."""
    if not is_valid_entry(entry):
        return None
    return ResourceHandle.from_entry(entry)
