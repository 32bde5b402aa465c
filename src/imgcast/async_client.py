"""Asynchronous imgcast client.

:class:`AsyncImgcastClient` mirrors :class:`~imgcast.client.ImgcastClient`
but every entry point is a coroutine.  Resolution runs in a worker thread
(storage metadata lookups may walk the disk); the upload uses
``httpx.AsyncClient``.  Concurrent invocations share nothing but the
configuration object and are not coordinated.

Usage::

    import asyncio
    from imgcast import AsyncImgcastClient, FileSystemStorage

    async def main():
        async with AsyncImgcastClient(
            FileSystemStorage("~/vault"),
            webhook_url="https://discord.com/api/webhooks/...",
        ) as client:
            outcome = await client.upload_path("attachments/cat.png")
            print(outcome.ok)

    asyncio.run(main())
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Any

from imgcast.client import (
    _FALLBACK_FILENAME,
    EDITOR_ACTION_TITLE,
    FILE_ACTION_TITLE,
    _build_config,
)
from imgcast.config import ImgcastConfig
from imgcast.errors import ImgcastNotFoundError
from imgcast.events import RenderEventBus
from imgcast.models import (
    ContextAction,
    InvocationContext,
    NotFound,
    Outcome,
    RenderedImage,
    ResourceHandle,
)
from imgcast.notify import LogNotifier, Notifier, format_notice
from imgcast.resolve import ResourceResolver, has_embedded_link, parse_address
from imgcast.storage import ResourceStorage
from imgcast.upload import AsyncUploadService


class AsyncImgcastClient:
    """Asynchronous resolve-and-upload client.

    Parameters
    ----------
    storage:
        The vault to resolve addresses against and read bytes from.
    config:
        Shared :class:`ImgcastConfig`, read at the start of every upload.
    notifier:
        Receives one notice per invocation.
    **kwargs:
        Forwarded to :class:`ImgcastConfig` when *config* is omitted.
    """

    def __init__(
        self,
        storage: ResourceStorage,
        config: ImgcastConfig | None = None,
        notifier: Notifier | None = None,
        **kwargs: Any,
    ) -> None:
        self._config = _build_config(config, kwargs)
        self._storage = storage
        self._resolver = ResourceResolver(storage, metrics=self._config.metrics)
        self._uploader = AsyncUploadService(self._config, storage)
        self._notifier = notifier if notifier is not None else LogNotifier()

    @property
    def config(self) -> ImgcastConfig:
        return self._config

    @property
    def resolver(self) -> ResourceResolver:
        return self._resolver

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    async def upload_from_context(self, context: InvocationContext) -> Outcome:
        """Resolve *context* and upload the result (async)."""
        handle = await self._resolve(context)
        if handle is None:
            return self._report(NotFound(address=context.describe()))
        return self._report(await self._uploader.upload(handle))

    async def upload_path(self, path: str) -> Outcome:
        return await self.upload_from_context(InvocationContext(active_path=path))

    async def upload_from_text(self, text: str) -> Outcome:
        return await self.upload_from_context(InvocationContext(text=text))

    async def upload_rendered(
        self,
        src: str,
        data: bytes | None = None,
        active_path: str | None = None,
    ) -> Outcome:
        """Upload an image the rendering layer displayed (async).

        See :meth:`ImgcastClient.upload_rendered`.
        """
        handle = await self._resolve(InvocationContext(active_path=active_path, source=src))
        if handle is not None:
            return self._report(await self._uploader.upload(handle))
        if data is None:
            return self._report(NotFound(address=src))
        filename = parse_address(src).filename or _FALLBACK_FILENAME
        return self._report(await self._uploader.upload_bytes(data, filename))

    # ------------------------------------------------------------------
    # Host integration
    # ------------------------------------------------------------------

    async def context_actions(self, context: InvocationContext) -> list[ContextAction]:
        """Return menu actions for *context*; each ``run`` returns a coroutine.

        The storage lookup for the active file runs in a worker thread.
        """
        if context.active_path and await asyncio.to_thread(
            self._resolver.from_active, context.active_path,
        ):
            path = context.active_path
            return [ContextAction(FILE_ACTION_TITLE, run=lambda: self.upload_path(path))]
        if has_embedded_link(context.text):
            text = context.text or ""
            return [ContextAction(EDITOR_ACTION_TITLE, run=lambda: self.upload_from_text(text))]
        if context.source:
            src = context.source
            return [ContextAction(FILE_ACTION_TITLE, run=lambda: self.upload_rendered(src))]
        return []

    def watch_rendered(
        self,
        bus: RenderEventBus,
        active_path: Callable[[], str | None] | None = None,
    ) -> Callable[[], None]:
        """Offer an upload action for every image *bus* announces.

        The action's ``run`` returns a coroutine for the host to await.
        """

        def on_rendered(image: RenderedImage) -> ContextAction:
            def run() -> Any:
                focused = active_path() if active_path is not None else None
                return self.upload_rendered(image.src, image.data, active_path=focused)

            return ContextAction(FILE_ACTION_TITLE, run=run)

        return bus.subscribe(on_rendered)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _resolve(self, context: InvocationContext) -> ResourceHandle | None:
        try:
            return await asyncio.to_thread(self._resolver.resolve, context)
        except ImgcastNotFoundError:
            return None

    def _report(self, outcome: Outcome) -> Outcome:
        self._notifier.notify(format_notice(outcome))
        return outcome

    async def close(self) -> None:
        """Close the underlying async HTTP transport."""
        await self._uploader.close()

    async def __aenter__(self) -> AsyncImgcastClient:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()
