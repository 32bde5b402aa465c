"""Upload pipeline: classify, build the multipart form, send, map outcome.

Exports
-------
UploadService / AsyncUploadService
    One upload attempt per call, returning a tagged outcome.
build_upload_request / to_multipart
    Wire-format construction for the webhook POST.
content_type_for
    Static, total extension to MIME mapping.
"""

from .classify import content_type_for, extension_of
from .form import build_upload_request, to_multipart
from .service import AsyncUploadService, UploadService

__all__ = [
    "AsyncUploadService",
    "UploadService",
    "build_upload_request",
    "content_type_for",
    "extension_of",
    "to_multipart",
]
