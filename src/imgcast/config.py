"""Runtime configuration for imgcast.

:class:`ImgcastConfig` is a mutable dataclass holding every knob the
upload pipeline reads.  A single instance is shared by reference between
the settings store and the upload services; the services read
``webhook_url`` and ``username`` at the start of every upload, so edits
take effect on the next call without a restart.

Two module-level constants define the image allowlist:

* :data:`IMAGE_EXTENSIONS` -- extensions accepted as image resources.
* :data:`CONTENT_TYPES` -- extension to MIME type mapping used when
  building the multipart body.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any
from urllib.parse import urlparse

# ---------------------------------------------------------------------------
# Image constants
# ---------------------------------------------------------------------------

IMAGE_EXTENSIONS: frozenset[str] = frozenset({
    "png", "jpg", "jpeg", "gif", "webp", "bmp", "svg",
})
"""Lowercase extensions (without the dot) that identify an image resource."""

CONTENT_TYPES: dict[str, str] = {
    "png": "image/png",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "gif": "image/gif",
    "webp": "image/webp",
    "bmp": "image/bmp",
    "svg": "image/svg+xml",
}
"""Static extension to ``Content-Type`` mapping for uploaded files."""

DEFAULT_CONTENT_TYPE = "application/octet-stream"

DEFAULT_USERNAME = "ImgCast Bot"

UPLOAD_CAPTION = "Image upload"
"""Literal sent in the ``content`` form field of every upload."""


def validate_webhook_url(url: str) -> None:
    """Raise ``ValueError`` unless *url* is empty or an absolute http(s) URL."""
    if not url or not url.strip():
        return
    parsed = urlparse(url.strip())
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValueError("webhook_url must be an absolute http(s) URL or empty")


# ---------------------------------------------------------------------------
# Configuration dataclass
# ---------------------------------------------------------------------------

@dataclass
class ImgcastConfig:
    """Complete configuration for an imgcast client.

    Every parameter has a default.  An empty ``webhook_url`` is a valid
    state meaning "unconfigured": uploads short-circuit instead of failing
    on the network.

    Parameters
    ----------
    webhook_url:
        Endpoint accepting ``multipart/form-data`` POSTs.  Treated as a
        secret: never logged in full.
    username:
        Display label sent in the ``username`` form field.
    timeout_seconds:
        HTTP request timeout in seconds, applied by the transport.
    http_proxy:
        Optional HTTP/HTTPS proxy URL.
    metrics:
        A :class:`~imgcast.observability.MetricsHook` implementation.
        ``None`` selects the no-op hook.
    debug_dump_requests:
        Log every webhook response (status and truncated body) at DEBUG.
    """

    # ── Webhook ─────────────────────────────────────────────────────────
    webhook_url: str = ""

    username: str = DEFAULT_USERNAME

    # ── HTTP ────────────────────────────────────────────────────────────
    timeout_seconds: float = 30.0

    http_proxy: str | None = None

    # ── Observability ──────────────────────────────────────────────────
    metrics: Any | None = None

    debug_dump_requests: bool = False

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        validate_webhook_url(self.webhook_url)
        if self.timeout_seconds <= 0:
            raise ValueError(f"timeout_seconds must be > 0, got {self.timeout_seconds}")

    @property
    def is_configured(self) -> bool:
        return bool(self.webhook_url and self.webhook_url.strip())

    def __repr__(self) -> str:
        """Mask the webhook URL to prevent accidental credential leakage."""
        from imgcast.utils.redact import redact_url

        parts: list[str] = []
        for f in dataclasses.fields(self):
            val = getattr(self, f.name)
            if f.name == "webhook_url":
                parts.append(f"webhook_url={redact_url(val)!r}")
            else:
                parts.append(f"{f.name}={val!r}")
        return f"ImgcastConfig({', '.join(parts)})"
