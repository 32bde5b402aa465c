"""HTTP transport layer for webhook uploads."""

from .transport import AsyncWebhookTransport, WebhookTransport

__all__ = [
    "AsyncWebhookTransport",
    "WebhookTransport",
]
