"""Metrics hook protocol and no-op default implementation.

imgcast emits counters and timings at the resolution and upload
boundaries.  By default a :class:`NoopMetricsHook` is used.  Supply any
object satisfying :class:`MetricsHook` through
``ImgcastConfig(metrics=...)`` to route them to StatsD, Prometheus, etc.

Emitted metric names:

* ``imgcast.resolve_total``          -- counter, tag ``strategy``
* ``imgcast.resolve_failure_total``  -- counter
* ``imgcast.upload_success_total``   -- counter
* ``imgcast.upload_failure_total``   -- counter, tag ``reason``
* ``imgcast.upload_duration_ms``     -- timing, tag ``outcome``
* ``imgcast.request_duration_ms``    -- timing, tag ``status``
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class MetricsHook(Protocol):
    """Protocol that any metrics backend must satisfy.

    All methods accept an optional *tags* dict of string keys and values.
    """

    def increment(
        self,
        name: str,
        value: int = 1,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Increment a counter metric."""
        ...

    def timing(
        self,
        name: str,
        ms: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Record a duration in milliseconds."""
        ...


class NoopMetricsHook:
    """Default metrics implementation that discards all data points."""

    __slots__ = ()

    def increment(
        self,
        name: str,
        value: int = 1,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass

    def timing(
        self,
        name: str,
        ms: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass
