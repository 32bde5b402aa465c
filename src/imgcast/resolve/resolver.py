"""Resolve an ambiguous address to exactly one image resource.

Strategies run in a fixed order and the first valid handle wins:

1. **Active identifier** -- the focused resource, if it is an image.
2. **Embedded link** -- the address captured from ``![...](...)`` in an
   editor fragment, looked up as a storage path.
3. **Opaque source** -- a rendered address.  A local-scheme address is
   looked up by its stripped path; failing that, storage is scanned for
   an image whose name equals the final path segment.

The filename scan is linear in the number of stored entries.  When
several entries share the name, the lexicographically smallest path is
chosen so the result never depends on enumeration order.

The resolver performs metadata lookups only; it never reads content.
"""

from __future__ import annotations

from typing import Any

from imgcast.errors import ImgcastNotFoundError
from imgcast.models import (
    InvocationContext,
    ResolveStrategy,
    ResourceHandle,
)
from imgcast.observability import NoopMetricsHook, get_logger
from imgcast.storage import ResourceStorage

from .address import parse_address
from .links import extract_embedded_link
from .validate import is_valid_entry, to_handle

log = get_logger("imgcast.resolve")


class ResourceResolver:
    """Map an :class:`InvocationContext` to a :class:`ResourceHandle`.

    Parameters
    ----------
    storage:
        Any :class:`~imgcast.storage.ResourceStorage`.
    metrics:
        Optional :class:`~imgcast.observability.MetricsHook`.
    """

    def __init__(self, storage: ResourceStorage, metrics: Any | None = None) -> None:
        self._storage = storage
        self._metrics = metrics if metrics is not None else NoopMetricsHook()

    # -- individual strategies ---------------------------------------------

    def lookup(self, path: str | None) -> ResourceHandle | None:
        """Direct lookup of a storage path; ``None`` unless it is a valid image."""
        if not path:
            return None
        return to_handle(self._storage.get(path))

    def from_active(self, active_path: str | None) -> ResourceHandle | None:
        return self.lookup(active_path)

    def from_text(self, text: str | None) -> ResourceHandle | None:
        address = extract_embedded_link(text)
        if address is None:
            return None
        return self.lookup(address)

    def find_by_filename(self, filename: str) -> ResourceHandle | None:
        """Scan every entry for a valid image named *filename*."""
        if not filename:
            return None
        matches = [
            entry
            for entry in self._storage.list_entries()
            if entry.name == filename and is_valid_entry(entry)
        ]
        if not matches:
            return None
        matches.sort(key=lambda e: e.path)
        if len(matches) > 1:
            log.warning(
                "Ambiguous filename, choosing smallest path",
                extra={
                    "extra_fields": {
                        "op": "resolve",
                        "filename": filename,
                        "candidates": [m.path for m in matches],
                        "chosen": matches[0].path,
                    }
                },
            )
        return ResourceHandle.from_entry(matches[0])

    def from_source(self, source: str | None) -> tuple[ResourceHandle, ResolveStrategy] | None:
        if not source:
            return None
        parsed = parse_address(source)
        if parsed.is_local:
            handle = self.lookup(parsed.path)
            if handle is not None:
                return handle, ResolveStrategy.LOCAL_SCHEME
        handle = self.find_by_filename(parsed.filename)
        if handle is not None:
            return handle, ResolveStrategy.FILENAME_SCAN
        return None

    # -- public API --------------------------------------------------------

    def try_resolve(
        self, context: InvocationContext,
    ) -> tuple[ResourceHandle, ResolveStrategy] | None:
        """Run every applicable strategy; return the first hit or ``None``."""
        handle = self.from_active(context.active_path)
        if handle is not None:
            return handle, ResolveStrategy.ACTIVE

        handle = self.from_text(context.text)
        if handle is not None:
            return handle, ResolveStrategy.EMBEDDED_LINK

        return self.from_source(context.source)

    def resolve(self, context: InvocationContext) -> ResourceHandle:
        """Resolve *context* to a handle.

        Raises
        ------
        ImgcastNotFoundError
            If no strategy yields a valid image resource.  The message
            includes the original address.
        """
        result = self.try_resolve(context)
        address = context.describe()
        if result is None:
            self._metrics.increment("imgcast.resolve_failure_total")
            log.info(
                "Resource not found",
                extra={"extra_fields": {"op": "resolve", "address": address}},
            )
            raise ImgcastNotFoundError(
                message=f"Resource not found for address {address!r}",
                context={
                    "address": address,
                    "active_path": context.active_path,
                    "text": context.text,
                    "source": context.source,
                },
            )

        handle, strategy = result
        self._metrics.increment(
            "imgcast.resolve_total", tags={"strategy": strategy.value},
        )
        log.debug(
            "Resolved resource",
            extra={
                "extra_fields": {
                    "op": "resolve",
                    "address": address,
                    "strategy": strategy.value,
                    "path": handle.path,
                }
            },
        )
        return handle
