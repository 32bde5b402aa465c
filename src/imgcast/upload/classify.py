"""Content-type classification from file extensions."""

from __future__ import annotations

from pathlib import PurePosixPath

from imgcast.config import CONTENT_TYPES, DEFAULT_CONTENT_TYPE


def content_type_for(extension: str | None) -> str:
    """Map an extension (any case, with or without the dot) to a MIME type.

    The mapping is total: unknown or missing extensions fall back to
    ``application/octet-stream`` so uploads proceed best-effort.
    """
    if not extension:
        return DEFAULT_CONTENT_TYPE
    return CONTENT_TYPES.get(extension.lower().lstrip("."), DEFAULT_CONTENT_TYPE)


def extension_of(filename: str) -> str:
    """Return the extension of *filename* without the dot, or ``""``."""
    suffix = PurePosixPath(filename).suffix
    return suffix[1:] if suffix else ""
