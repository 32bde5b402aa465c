"""Sync and async HTTP transports for webhook uploads.

Each transport sends exactly one ``POST`` per call:

1. Send the multipart request with no custom or auth headers.
2. Read the full response body (so callers can report it verbatim).
3. Return the :class:`httpx.Response`, whatever its status.
4. On timeout, DNS failure, refused connection or an unusable URL, raise
   :class:`ImgcastTransportError`.

There is no retry and no rate limiting: every call is one attempt.
"""

from __future__ import annotations

import time
from typing import Any

import httpx

from imgcast.config import ImgcastConfig
from imgcast.errors import ImgcastTransportError
from imgcast.observability import NoopMetricsHook, get_logger
from imgcast.utils.redact import redact_url, scrub_url

log = get_logger("imgcast.transport")

_BODY_DUMP_LIMIT = 1000


# ---------------------------------------------------------------------------
# Shared helpers (used by both sync and async transports)
# ---------------------------------------------------------------------------

def _transport_error(url: str, exc: Exception) -> ImgcastTransportError:
    safe_url = redact_url(url)
    detail = scrub_url(str(exc), url) or type(exc).__name__
    log.warning(
        "Webhook request failed",
        extra={
            "extra_fields": {
                "op": "post_form",
                "url": safe_url,
                "error": detail,
                "error_type": type(exc).__name__,
            }
        },
    )
    return ImgcastTransportError(
        message=f"Network error on POST {safe_url}: {detail}",
        context={"url": safe_url},
        cause=exc,
    )


def _record_response(
    config: ImgcastConfig,
    metrics: Any,
    url: str,
    response: httpx.Response,
    elapsed_ms: float,
) -> None:
    metrics.timing(
        "imgcast.request_duration_ms",
        elapsed_ms,
        tags={"status": str(response.status_code)},
    )
    if config.debug_dump_requests:
        log.debug(
            "Webhook response",
            extra={
                "extra_fields": {
                    "op": "post_form",
                    "url": redact_url(url),
                    "status_code": response.status_code,
                    "body": response.text[:_BODY_DUMP_LIMIT],
                    "elapsed_ms": round(elapsed_ms, 1),
                }
            },
        )


def _client_kwargs(config: ImgcastConfig) -> dict[str, Any]:
    return {
        "timeout": httpx.Timeout(config.timeout_seconds),
        "proxy": config.http_proxy,
    }


# ---------------------------------------------------------------------------
# Sync transport
# ---------------------------------------------------------------------------

class WebhookTransport:
    """Synchronous single-shot webhook transport.

    Parameters
    ----------
    config:
        An :class:`ImgcastConfig` supplying timeout, proxy and metrics.
        The webhook URL is *not* taken from here; callers pass the URL
        they snapshotted for each request.
    """

    def __init__(self, config: ImgcastConfig) -> None:
        self._config = config
        self._metrics = config.metrics if config.metrics is not None else NoopMetricsHook()
        self._client = httpx.Client(**_client_kwargs(config))

    def post_form(
        self,
        url: str,
        data: dict[str, str],
        files: dict[str, tuple[str, bytes, str]],
    ) -> httpx.Response:
        """POST a ``multipart/form-data`` body to *url*.

        Parameters
        ----------
        url:
            Absolute endpoint URL.
        data:
            Plain text form fields.
        files:
            File fields as ``{field: (filename, content, content_type)}``.

        Returns
        -------
        httpx.Response
            The response with its body fully read.

        Raises
        ------
        ImgcastTransportError
            On any transport-level failure.
        """
        t0 = time.monotonic()
        try:
            response = self._client.post(url, data=data, files=files)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise _transport_error(url, exc) from exc
        _record_response(
            self._config, self._metrics, url, response,
            (time.monotonic() - t0) * 1000,
        )
        return response

    def close(self) -> None:
        """Close the underlying HTTP client and release resources."""
        self._client.close()

    def __enter__(self) -> WebhookTransport:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()


# ---------------------------------------------------------------------------
# Async transport
# ---------------------------------------------------------------------------

class AsyncWebhookTransport:
    """Asynchronous single-shot webhook transport.

    Mirrors :class:`WebhookTransport` on top of ``httpx.AsyncClient``.
    """

    def __init__(self, config: ImgcastConfig) -> None:
        self._config = config
        self._metrics = config.metrics if config.metrics is not None else NoopMetricsHook()
        self._client = httpx.AsyncClient(**_client_kwargs(config))

    async def post_form(
        self,
        url: str,
        data: dict[str, str],
        files: dict[str, tuple[str, bytes, str]],
    ) -> httpx.Response:
        """POST a ``multipart/form-data`` body to *url* (async).

        See :meth:`WebhookTransport.post_form` for parameter documentation.
        """
        t0 = time.monotonic()
        try:
            response = await self._client.post(url, data=data, files=files)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise _transport_error(url, exc) from exc
        _record_response(
            self._config, self._metrics, url, response,
            (time.monotonic() - t0) * 1000,
        )
        return response

    async def close(self) -> None:
        """Close the underlying async HTTP client and release resources."""
        await self._client.aclose()

    async def __aenter__(self) -> AsyncWebhookTransport:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()
