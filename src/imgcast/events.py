"""Rendered-image event subscription.

The rendering layer calls :meth:`RenderEventBus.publish` whenever it
displays an image.  Subscribers receive the :class:`RenderedImage` and
may answer with a :class:`ContextAction` for the host to attach to that
image's context menu.  Each ``src`` is processed once; publishing it
again returns the actions produced the first time, as long as it is still
among the most recently published sources.
"""

from __future__ import annotations

import threading
from collections import OrderedDict
from collections.abc import Callable
from typing import Optional

from imgcast.models import ContextAction, RenderedImage
from imgcast.observability import get_logger

log = get_logger("imgcast.events")

Subscriber = Callable[[RenderedImage], Optional[ContextAction]]

DEFAULT_MAX_CACHED = 256


class RenderEventBus:
    """Fan out rendered-image events to subscribers.

    Parameters
    ----------
    max_cached:
        Number of sources whose actions are remembered.  Actions may hold
        rendered bytes, so the least recently published source is evicted
        once the cap is reached.
    """

    def __init__(self, max_cached: int = DEFAULT_MAX_CACHED) -> None:
        if max_cached < 1:
            raise ValueError(f"max_cached must be >= 1, got {max_cached}")
        self._max_cached = max_cached
        self._subscribers: list[Subscriber] = []
        self._seen: OrderedDict[str, list[ContextAction]] = OrderedDict()
        self._lock = threading.Lock()

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register *callback*; return a function that removes it."""
        with self._lock:
            self._subscribers.append(callback)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe

    def publish(self, image: RenderedImage) -> list[ContextAction]:
        """Announce a displayed image and collect the offered actions."""
        with self._lock:
            cached = self._seen.get(image.src)
            if cached is not None:
                self._seen.move_to_end(image.src)
                return list(cached)
            subscribers = list(self._subscribers)

        actions: list[ContextAction] = []
        for callback in subscribers:
            try:
                action = callback(image)
            except Exception:
                log.exception(
                    "Render subscriber failed",
                    extra={"extra_fields": {"op": "publish", "src": image.src}},
                )
                continue
            if action is not None:
                actions.append(action)

        with self._lock:
            self._seen.setdefault(image.src, actions)
            self._seen.move_to_end(image.src)
            while len(self._seen) > self._max_cached:
                self._seen.popitem(last=False)
        log.debug(
            "Rendered image published",
            extra={"extra_fields": {"op": "publish", "src": image.src, "actions": len(actions)}},
        )
        return list(actions)

    def forget(self, src: str) -> None:
        """Drop the cached actions for *src* so the next publish re-runs subscribers."""
        with self._lock:
            self._seen.pop(src, None)

    @property
    def cached_count(self) -> int:
        return len(self._seen)

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)
