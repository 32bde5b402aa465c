"""Multipart form construction for webhook uploads.

Wire contract (one POST, ``multipart/form-data``, exactly three parts):

* ``file1``    -- the file bytes, with filename and content type
* ``username`` -- the configured display name
* ``content``  -- the literal ``"Image upload"``
"""

from __future__ import annotations

from imgcast.config import UPLOAD_CAPTION
from imgcast.models import UploadRequest

from .classify import content_type_for, extension_of

FILE_FIELD = "file1"
USERNAME_FIELD = "username"
CONTENT_FIELD = "content"


def build_upload_request(
    data: bytes,
    filename: str,
    endpoint: str,
    display_name: str,
    extension: str | None = None,
) -> UploadRequest:
    """Assemble an :class:`UploadRequest` for one attempt.

    *extension* defaults to the suffix of *filename*.
    """
    ext = extension if extension is not None else extension_of(filename)
    return UploadRequest(
        data=data,
        filename=filename,
        content_type=content_type_for(ext),
        endpoint=endpoint,
        display_name=display_name,
        caption=UPLOAD_CAPTION,
    )


def to_multipart(
    request: UploadRequest,
) -> tuple[dict[str, str], dict[str, tuple[str, bytes, str]]]:
    """Split *request* into httpx ``data`` and ``files`` arguments."""
    data = {
        USERNAME_FIELD: request.display_name,
        CONTENT_FIELD: request.caption,
    }
    files = {
        FILE_FIELD: (request.filename, request.data, request.content_type),
    }
    return data, files
