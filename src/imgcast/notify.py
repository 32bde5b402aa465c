"""User-visible notices for terminal outcomes.

Every invocation produces exactly one short string: ``✓`` for success,
``✗`` for every failure.  The host decides how to display it.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from imgcast.models import (
    NotFound,
    Outcome,
    RemoteRejected,
    Success,
    TransportError,
    Unconfigured,
)
from imgcast.observability import get_logger

SUCCESS_MARK = "✓"
FAILURE_MARK = "✗"


def format_notice(outcome: Outcome) -> str:
    """Render *outcome* as a one-line notice."""
    if isinstance(outcome, Success):
        return f"{SUCCESS_MARK} {outcome.filename} uploaded successfully"
    if isinstance(outcome, RemoteRejected):
        target = f" {outcome.filename}" if outcome.filename else ""
        return f"{FAILURE_MARK} Failed to upload{target}: {outcome.status_code} {outcome.body}"
    if isinstance(outcome, TransportError):
        return f"{FAILURE_MARK} Upload failed: {outcome.message}"
    if isinstance(outcome, Unconfigured):
        return f"{FAILURE_MARK} Please configure a webhook URL in settings"
    if isinstance(outcome, NotFound):
        return f"{FAILURE_MARK} Could not find image file from context. Src: {outcome.address}"
    raise TypeError(f"Unknown outcome type: {type(outcome).__name__}")


@runtime_checkable
class Notifier(Protocol):
    """Receives one notice per invocation."""

    def notify(self, message: str) -> None:
        ...


class LogNotifier:
    """Default notifier that writes notices to the ``imgcast.notify`` logger."""

    def __init__(self) -> None:
        self._log = get_logger("imgcast.notify")

    def notify(self, message: str) -> None:
        self._log.info(message, extra={"extra_fields": {"op": "notify"}})


class CollectingNotifier:
    """Notifier that keeps every notice in :attr:`messages`."""

    def __init__(self) -> None:
        self.messages: list[str] = []

    def notify(self, message: str) -> None:
        self.messages.append(message)
