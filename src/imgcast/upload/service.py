"""Webhook upload services.

:class:`UploadService` and :class:`AsyncUploadService` execute exactly
one upload attempt per call and always return a tagged
:data:`~imgcast.models.UploadOutcome`; nothing is raised past them.

Each call runs, in order:

1. Snapshot ``webhook_url`` and ``username`` from the shared config.
   An empty URL short-circuits to :class:`Unconfigured` before storage or
   network are touched.
2. Read the resource bytes once.
3. Classify the content type from the extension.
4. POST the three-part multipart body.
5. Map the result: 2xx to :class:`Success`, any other status to
   :class:`RemoteRejected` with the full body, any exception to
   :class:`TransportError`.

Calls share no mutable state, so concurrent uploads are independent and
uncoordinated.
"""

from __future__ import annotations

import asyncio
import time
from typing import Any

import httpx

from imgcast.config import ImgcastConfig
from imgcast.errors import ImgcastError
from imgcast.models import (
    RemoteRejected,
    ResourceHandle,
    Success,
    TransportError,
    Unconfigured,
    UploadOutcome,
)
from imgcast.observability import NoopMetricsHook, get_logger
from imgcast.storage import ResourceStorage
from imgcast.utils.redact import redact_url
from imgcast.webhook import AsyncWebhookTransport, WebhookTransport

from .form import build_upload_request, to_multipart

log = get_logger("imgcast.upload")


# ---------------------------------------------------------------------------
# Shared helpers (used by both sync and async services)
# ---------------------------------------------------------------------------

def _snapshot(config: ImgcastConfig) -> tuple[str, str] | None:
    """Read the endpoint and display name once for this attempt."""
    if not config.is_configured:
        return None
    return config.webhook_url.strip(), config.username


def _unconfigured(metrics: Any, filename: str) -> Unconfigured:
    metrics.increment("imgcast.upload_failure_total", tags={"reason": "unconfigured"})
    log.info(
        "Upload skipped: no webhook URL configured",
        extra={"extra_fields": {"op": "upload", "filename": filename}},
    )
    return Unconfigured()


def _outcome_from_response(response: httpx.Response, filename: str) -> UploadOutcome:
    if response.is_success:
        return Success(filename=filename)
    return RemoteRejected(
        status_code=response.status_code,
        body=response.text,
        filename=filename,
    )


def _outcome_from_exception(exc: Exception, filename: str) -> TransportError:
    if isinstance(exc, ImgcastError):
        message = exc.message
    else:
        message = str(exc) or type(exc).__name__
    return TransportError(message=message, filename=filename)


def _finish(
    metrics: Any,
    outcome: UploadOutcome,
    endpoint: str,
    elapsed_ms: float,
) -> UploadOutcome:
    """Emit metrics and a log line for a terminal outcome."""
    metrics.timing(
        "imgcast.upload_duration_ms", elapsed_ms, tags={"outcome": outcome.kind.value},
    )
    fields: dict[str, Any] = {
        "op": "upload",
        "outcome": outcome.kind.value,
        "url": redact_url(endpoint),
        "elapsed_ms": round(elapsed_ms, 1),
    }
    if isinstance(outcome, Success):
        metrics.increment("imgcast.upload_success_total")
        fields["filename"] = outcome.filename
        log.info("Upload complete", extra={"extra_fields": fields})
    elif isinstance(outcome, RemoteRejected):
        metrics.increment("imgcast.upload_failure_total", tags={"reason": "remote_rejected"})
        fields.update(filename=outcome.filename, status_code=outcome.status_code)
        log.warning("Upload rejected by webhook", extra={"extra_fields": fields})
    else:
        metrics.increment("imgcast.upload_failure_total", tags={"reason": "transport_error"})
        fields.update(filename=outcome.filename, error=outcome.message)
        log.warning("Upload failed", extra={"extra_fields": fields})
    return outcome


# ---------------------------------------------------------------------------
# Sync service
# ---------------------------------------------------------------------------

class UploadService:
    """Synchronous upload service.

    Parameters
    ----------
    config:
        Shared :class:`ImgcastConfig`, read at the start of every call.
    storage:
        Storage used to read resource bytes.
    transport:
        Optional pre-built :class:`WebhookTransport`.  When omitted the
        service creates and owns one.
    """

    def __init__(
        self,
        config: ImgcastConfig,
        storage: ResourceStorage,
        transport: WebhookTransport | None = None,
    ) -> None:
        self._config = config
        self._storage = storage
        self._owns_transport = transport is None
        self._transport = transport if transport is not None else WebhookTransport(config)
        self._metrics = config.metrics if config.metrics is not None else NoopMetricsHook()

    def upload(self, handle: ResourceHandle) -> UploadOutcome:
        """Upload the resource behind *handle*."""
        snapshot = _snapshot(self._config)
        if snapshot is None:
            return _unconfigured(self._metrics, handle.name)
        endpoint, username = snapshot

        t0 = time.monotonic()
        try:
            data = self._storage.read_bytes(handle.path)
            outcome = self._send(endpoint, username, data, handle.name, handle.extension)
        except Exception as exc:
            outcome = _outcome_from_exception(exc, handle.name)
        return _finish(self._metrics, outcome, endpoint, (time.monotonic() - t0) * 1000)

    def upload_bytes(self, data: bytes, filename: str) -> UploadOutcome:
        """Upload raw *data* under *filename*, bypassing storage."""
        snapshot = _snapshot(self._config)
        if snapshot is None:
            return _unconfigured(self._metrics, filename)
        endpoint, username = snapshot

        t0 = time.monotonic()
        try:
            outcome = self._send(endpoint, username, data, filename, None)
        except Exception as exc:
            outcome = _outcome_from_exception(exc, filename)
        return _finish(self._metrics, outcome, endpoint, (time.monotonic() - t0) * 1000)

    def _send(
        self,
        endpoint: str,
        username: str,
        data: bytes,
        filename: str,
        extension: str | None,
    ) -> UploadOutcome:
        request = build_upload_request(data, filename, endpoint, username, extension)
        form, files = to_multipart(request)
        response = self._transport.post_form(request.endpoint, form, files)
        return _outcome_from_response(response, filename)

    def close(self) -> None:
        if self._owns_transport:
            self._transport.close()


# ---------------------------------------------------------------------------
# Async service
# ---------------------------------------------------------------------------

class AsyncUploadService:
    """Asynchronous upload service.

    Mirrors :class:`UploadService`.  Storage reads run in a worker thread
    so a slow disk does not block the event loop.
    """

    def __init__(
        self,
        config: ImgcastConfig,
        storage: ResourceStorage,
        transport: AsyncWebhookTransport | None = None,
    ) -> None:
        self._config = config
        self._storage = storage
        self._owns_transport = transport is None
        self._transport = transport if transport is not None else AsyncWebhookTransport(config)
        self._metrics = config.metrics if config.metrics is not None else NoopMetricsHook()

    async def upload(self, handle: ResourceHandle) -> UploadOutcome:
        """Upload the resource behind *handle* (async)."""
        snapshot = _snapshot(self._config)
        if snapshot is None:
            return _unconfigured(self._metrics, handle.name)
        endpoint, username = snapshot

        t0 = time.monotonic()
        try:
            data = await asyncio.to_thread(self._storage.read_bytes, handle.path)
            outcome = await self._send(endpoint, username, data, handle.name, handle.extension)
        except Exception as exc:
            outcome = _outcome_from_exception(exc, handle.name)
        return _finish(self._metrics, outcome, endpoint, (time.monotonic() - t0) * 1000)

    async def upload_bytes(self, data: bytes, filename: str) -> UploadOutcome:
        """Upload raw *data* under *filename*, bypassing storage (async)."""
        snapshot = _snapshot(self._config)
        if snapshot is None:
            return _unconfigured(self._metrics, filename)
        endpoint, username = snapshot

        t0 = time.monotonic()
        try:
            outcome = await self._send(endpoint, username, data, filename, None)
        except Exception as exc:
            outcome = _outcome_from_exception(exc, filename)
        return _finish(self._metrics, outcome, endpoint, (time.monotonic() - t0) * 1000)

    async def _send(
        self,
        endpoint: str,
        username: str,
        data: bytes,
        filename: str,
        extension: str | None,
    ) -> UploadOutcome:
        request = build_upload_request(data, filename, endpoint, username, extension)
        form, files = to_multipart(request)
        response = await self._transport.post_form(request.endpoint, form, files)
        return _outcome_from_response(response, filename)

    async def close(self) -> None:
        if self._owns_transport:
            await self._transport.close()
