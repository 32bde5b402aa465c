"""imgcast -- resolve vault image references and cast them to a webhook.

Public re-exports
-----------------

* **Clients:** :class:`ImgcastClient`, :class:`AsyncImgcastClient`
* **Configuration:** :class:`ImgcastConfig`, :class:`SettingsStore`
* **Storage:** :class:`ResourceStorage`, :class:`FileSystemStorage`
* **Errors:** Every :class:`ImgcastError` subclass and :class:`ErrorCode`
* **Models:** Handles, outcomes and host-facing snapshot types

Usage::

    from imgcast import FileSystemStorage, ImgcastClient

    client = ImgcastClient(
        FileSystemStorage("/path/to/vault"),
        webhook_url="https://discord.com/api/webhooks/<id>/<token>",
    )
    client.upload_path("attachments/cat.png")
"""

from __future__ import annotations

# ── Clients ────────────────────────────────────────────────────────────
from imgcast.async_client import AsyncImgcastClient
from imgcast.client import ImgcastClient

# ── Configuration ───────────────────────────────────────────────────────
from imgcast.config import (
    CONTENT_TYPES,
    IMAGE_EXTENSIONS,
    ImgcastConfig,
)

# ── Errors ──────────────────────────────────────────────────────────────
from imgcast.errors import (
    ErrorCode,
    ImgcastError,
    ImgcastInvalidResourceError,
    ImgcastNotFoundError,
    ImgcastRemoteRejectedError,
    ImgcastStorageError,
    ImgcastTransportError,
    ImgcastUnconfiguredError,
)

# ── Events and notices ──────────────────────────────────────────────────
from imgcast.events import RenderEventBus

# ── Models ──────────────────────────────────────────────────────────────
from imgcast.models import (
    ContextAction,
    InvocationContext,
    NotFound,
    Outcome,
    OutcomeKind,
    ParsedAddress,
    RemoteRejected,
    RenderedImage,
    ResolveStrategy,
    ResourceHandle,
    StorageEntry,
    Success,
    TransportError,
    Unconfigured,
    UploadOutcome,
    UploadRequest,
)
from imgcast.notify import CollectingNotifier, LogNotifier, Notifier, format_notice
from imgcast.settings import SettingsStore

# ── Storage ─────────────────────────────────────────────────────────────
from imgcast.storage import FileSystemStorage, ResourceStorage

# ── Public surface ──────────────────────────────────────────────────────

__all__ = [
    # Clients
    "ImgcastClient",
    "AsyncImgcastClient",
    # Configuration
    "ImgcastConfig",
    "SettingsStore",
    "IMAGE_EXTENSIONS",
    "CONTENT_TYPES",
    # Storage
    "ResourceStorage",
    "FileSystemStorage",
    # Errors
    "ErrorCode",
    "ImgcastError",
    "ImgcastUnconfiguredError",
    "ImgcastNotFoundError",
    "ImgcastInvalidResourceError",
    "ImgcastStorageError",
    "ImgcastTransportError",
    "ImgcastRemoteRejectedError",
    # Events and notices
    "RenderEventBus",
    "Notifier",
    "LogNotifier",
    "CollectingNotifier",
    "format_notice",
    # Models: resources
    "StorageEntry",
    "ResourceHandle",
    "UploadRequest",
    "ParsedAddress",
    "ResolveStrategy",
    # Models: outcomes
    "OutcomeKind",
    "Outcome",
    "UploadOutcome",
    "Success",
    "RemoteRejected",
    "TransportError",
    "Unconfigured",
    "NotFound",
    # Models: host snapshots
    "InvocationContext",
    "RenderedImage",
    "ContextAction",
]
