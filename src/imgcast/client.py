"""Synchronous imgcast client.

:class:`ImgcastClient` wires the resolver, the upload service and a
notifier together.  Every public entry point resolves an address,
uploads the resource, hands exactly one notice to the notifier and
returns the terminal :data:`~imgcast.models.Outcome`.

Usage::

    from imgcast import FileSystemStorage, ImgcastClient

    client = ImgcastClient(
        FileSystemStorage("~/vault"),
        webhook_url="https://discord.com/api/webhooks/...",
    )
    outcome = client.upload_from_text("see ![cat](attachments/cat.png)")
    print(outcome.ok)
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from imgcast.config import ImgcastConfig
from imgcast.errors import ImgcastNotFoundError
from imgcast.events import RenderEventBus
from imgcast.models import (
    ContextAction,
    InvocationContext,
    NotFound,
    Outcome,
    RenderedImage,
)
from imgcast.notify import LogNotifier, Notifier, format_notice
from imgcast.resolve import ResourceResolver, has_embedded_link, parse_address
from imgcast.storage import ResourceStorage
from imgcast.upload import UploadService

FILE_ACTION_TITLE = "Upload to webhook"
EDITOR_ACTION_TITLE = "Upload image to webhook"

_FALLBACK_FILENAME = "image"


def _build_config(config: ImgcastConfig | None, kwargs: dict[str, Any]) -> ImgcastConfig:
    if config is not None and kwargs:
        raise TypeError("Pass either config or config keyword arguments, not both")
    return config if config is not None else ImgcastConfig(**kwargs)


class ImgcastClient:
    """Synchronous resolve-and-upload client.

    Parameters
    ----------
    storage:
        The vault to resolve addresses against and read bytes from.
    config:
        Shared :class:`ImgcastConfig`.  Keep a reference to it (or to a
        :class:`~imgcast.settings.SettingsStore` bound to it) to change
        settings at runtime.
    notifier:
        Receives one notice per invocation.  Defaults to
        :class:`~imgcast.notify.LogNotifier`.
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
        self._uploader = UploadService(self._config, storage)
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

    def upload_from_context(self, context: InvocationContext) -> Outcome:
        """Resolve *context* and upload the result."""
        try:
            handle = self._resolver.resolve(context)
        except ImgcastNotFoundError:
            return self._report(NotFound(address=context.describe()))
        return self._report(self._uploader.upload(handle))

    def upload_path(self, path: str) -> Outcome:
        """Upload the resource selected in a file browser."""
        return self.upload_from_context(InvocationContext(active_path=path))

    def upload_from_text(self, text: str) -> Outcome:
        """Upload the image linked from an editor selection or line."""
        return self.upload_from_context(InvocationContext(text=text))

    def upload_rendered(
        self,
        src: str,
        data: bytes | None = None,
        active_path: str | None = None,
    ) -> Outcome:
        """Upload an image the rendering layer displayed.

        If *src* cannot be resolved to storage and the renderer supplied
        *data*, the bytes are uploaded directly under the address's
        filename.
        """
        context = InvocationContext(active_path=active_path, source=src)
        try:
            handle = self._resolver.resolve(context)
        except ImgcastNotFoundError:
            if data is None:
                return self._report(NotFound(address=src))
            filename = parse_address(src).filename or _FALLBACK_FILENAME
            return self._report(self._uploader.upload_bytes(data, filename))
        return self._report(self._uploader.upload(handle))

    # ------------------------------------------------------------------
    # Host integration
    # ------------------------------------------------------------------

    def context_actions(self, context: InvocationContext) -> list[ContextAction]:
        """Return the menu actions the host should offer for *context*.

        Empty when the context cannot refer to an image.
        """
        if context.active_path and self._resolver.from_active(context.active_path):
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

        *active_path* is called when an action runs, to pick up the file
        focused at click time.  Returns the unsubscribe function.
        """

        def on_rendered(image: RenderedImage) -> ContextAction:
            def run() -> Outcome:
                focused = active_path() if active_path is not None else None
                return self.upload_rendered(image.src, image.data, active_path=focused)

            return ContextAction(FILE_ACTION_TITLE, run=run)

        return bus.subscribe(on_rendered)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _report(self, outcome: Outcome) -> Outcome:
        self._notifier.notify(format_notice(outcome))
        return outcome

    def close(self) -> None:
        """Close the underlying HTTP transport."""
        self._uploader.close()

    def __enter__(self) -> ImgcastClient:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()
