"""Public data models for imgcast.

This module contains the resource handle, the per-upload request, every
terminal outcome type, and the small snapshot types exchanged with the
host application.  All types are plain dataclasses; outcomes and handles
are frozen so they can be compared and hashed.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

from imgcast.config import IMAGE_EXTENSIONS
from imgcast.errors import (
    ImgcastInvalidResourceError,
    ImgcastNotFoundError,
    ImgcastRemoteRejectedError,
    ImgcastTransportError,
    ImgcastUnconfiguredError,
)


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class OutcomeKind(str, Enum):
    """Tag carried by every terminal outcome."""

    SUCCESS = "success"
    """The webhook accepted the upload with a 2xx status."""

    REMOTE_REJECTED = "remote_rejected"
    """The webhook answered with a non-2xx status."""

    TRANSPORT_ERROR = "transport_error"
    """Reading, encoding or sending failed below the HTTP layer."""

    UNCONFIGURED = "unconfigured"
    """No webhook URL is set; nothing was attempted."""

    NOT_FOUND = "not_found"
    """The address did not resolve to an image resource."""


class ResolveStrategy(str, Enum):
    """Which resolution strategy produced a handle."""

    ACTIVE = "active"
    EMBEDDED_LINK = "embedded_link"
    LOCAL_SCHEME = "local_scheme"
    FILENAME_SCAN = "filename_scan"


# ---------------------------------------------------------------------------
# Storage and resources
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class StorageEntry:
    """Metadata for one item in storage, as reported by the storage layer.

    Attributes
    ----------
    path:
        Storage-relative POSIX path, unique within the namespace.
    name:
        Final path component including the extension.
    extension:
        Extension without the leading dot, in its original case.  Empty
        for directories and extensionless files.
    is_dir:
        ``True`` for containers.
    """

    path: str
    name: str
    extension: str = ""
    is_dir: bool = False


@dataclass(frozen=True)
class ResourceHandle:
    """The resolved, validated identity of one image in storage.

    Construction enforces the image invariant: the extension is
    lowercased and must be in :data:`~imgcast.config.IMAGE_EXTENSIONS`,
    otherwise :class:`ImgcastInvalidResourceError` is raised.
    """

    path: str
    name: str
    extension: str

    def __post_init__(self) -> None:
        ext = (self.extension or "").lower()
        if ext not in IMAGE_EXTENSIONS:
            raise ImgcastInvalidResourceError(
                message=f"{self.path!r} is not an image resource",
                context={"path": self.path, "extension": self.extension},
            )
        object.__setattr__(self, "extension", ext)

    @classmethod
    def from_entry(cls, entry: StorageEntry) -> ResourceHandle:
        if entry.is_dir:
            raise ImgcastInvalidResourceError(
                message=f"{entry.path!r} is a directory",
                context={"path": entry.path, "extension": entry.extension},
            )
        return cls(path=entry.path, name=entry.name, extension=entry.extension)


@dataclass
class UploadRequest:
    """Everything needed for one webhook POST.

    Built fresh for every upload from a configuration snapshot and never
    reused.
    """

    data: bytes
    filename: str
    content_type: str
    endpoint: str
    display_name: str
    caption: str

    def __repr__(self) -> str:
        from imgcast.utils.redact import redact_url

        return (
            f"UploadRequest(filename={self.filename!r}, "
            f"content_type={self.content_type!r}, "
            f"endpoint={redact_url(self.endpoint)!r}, "
            f"display_name={self.display_name!r}, "
            f"size={len(self.data)})"
        )


# ---------------------------------------------------------------------------
# Terminal outcomes
# ---------------------------------------------------------------------------

class _OutcomeMixin:
    kind: OutcomeKind

    @property
    def ok(self) -> bool:
        return self.kind is OutcomeKind.SUCCESS

    def raise_for_outcome(self) -> None:
        """Raise the matching :class:`ImgcastError` unless this is a success."""


@dataclass(frozen=True)
class Success(_OutcomeMixin):
    filename: str
    kind: OutcomeKind = field(default=OutcomeKind.SUCCESS, init=False)


@dataclass(frozen=True)
class RemoteRejected(_OutcomeMixin):
    """The endpoint returned a non-2xx status.

    ``body`` is the complete response text, read before the outcome is
    built so server diagnostics survive.
    """

    status_code: int
    body: str
    filename: str = ""
    kind: OutcomeKind = field(default=OutcomeKind.REMOTE_REJECTED, init=False)

    def raise_for_outcome(self) -> None:
        raise ImgcastRemoteRejectedError(
            message=f"Webhook rejected upload with status {self.status_code}",
            context={
                "status_code": self.status_code,
                "body": self.body,
                "filename": self.filename,
            },
        )


@dataclass(frozen=True)
class TransportError(_OutcomeMixin):
    message: str
    filename: str = ""
    kind: OutcomeKind = field(default=OutcomeKind.TRANSPORT_ERROR, init=False)

    def raise_for_outcome(self) -> None:
        raise ImgcastTransportError(
            message=self.message,
            context={"filename": self.filename},
        )


@dataclass(frozen=True)
class Unconfigured(_OutcomeMixin):
    kind: OutcomeKind = field(default=OutcomeKind.UNCONFIGURED, init=False)

    def raise_for_outcome(self) -> None:
        raise ImgcastUnconfiguredError()


@dataclass(frozen=True)
class NotFound(_OutcomeMixin):
    address: str
    kind: OutcomeKind = field(default=OutcomeKind.NOT_FOUND, init=False)

    def raise_for_outcome(self) -> None:
        raise ImgcastNotFoundError(
            message=f"Resource not found for address {self.address!r}",
            context={"address": self.address},
        )


UploadOutcome = Union[Success, RemoteRejected, TransportError, Unconfigured]
"""Everything an upload service can return."""

Outcome = Union[Success, RemoteRejected, TransportError, Unconfigured, NotFound]
"""Everything a client invocation can return."""


# ---------------------------------------------------------------------------
# Host-facing snapshots
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class InvocationContext:
    """Read-only snapshot supplied by one triggering action.

    Attributes
    ----------
    active_path:
        Identifier of the currently focused resource (file-browser
        selection or the file open in the active view).
    text:
        A text fragment from an editor: the selection, or the cursor
        line when nothing is selected.
    source:
        An opaque rendered address such as an ``<img src>`` value.
    """

    active_path: str | None = None
    text: str | None = None
    source: str | None = None

    def describe(self) -> str:
        """Return the most specific address for diagnostics."""
        return self.source or self.text or self.active_path or ""


@dataclass(frozen=True)
class ParsedAddress:
    """Structured form of an opaque rendered address.

    Attributes
    ----------
    scheme:
        Lowercased URL scheme, or ``""`` for scheme-less addresses.
    path:
        For local-scheme addresses, the storage-relative path left after
        stripping the scheme prefix.  Otherwise the address path.
    filename:
        Final path segment, percent-decoded.
    is_local:
        ``True`` when the scheme names a local resource and ``path`` can
        be looked up directly.
    """

    scheme: str
    path: str
    filename: str
    is_local: bool = False


@dataclass(frozen=True)
class RenderedImage:
    """An image the rendering layer has just displayed.

    ``data`` carries the already-loaded bytes when the renderer has them;
    they are used only if the source cannot be resolved to storage.
    """

    src: str
    data: bytes | None = field(default=None, repr=False)


@dataclass
class ContextAction:
    """A menu entry offered back to the host application.

    Attributes
    ----------
    title:
        Label shown in the menu.
    icon:
        Host icon identifier.
    run:
        Zero-argument callable performing the action.  Returns an
        :data:`Outcome` (sync client) or an awaitable of one (async client).
    """

    title: str
    run: Callable[[], Any]
    icon: str = "upload"
