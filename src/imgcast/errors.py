"""Error hierarchy for imgcast.

Every public error class inherits from ImgcastError. Each carries a
machine-readable ``code`` (from :class:`ErrorCode`), a human-readable
``message``, an optional structured ``context`` dict, and an optional
``cause`` (chained exception).

These exceptions are raised inside the resolver, storage and transport
layers.  The upload services and clients convert them into tagged
outcomes (see :mod:`imgcast.models`), so application code normally sees
them only through :meth:`~imgcast.models.Success.raise_for_outcome`.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

# ---------------------------------------------------------------------------
# Error code enum
# ---------------------------------------------------------------------------

class ErrorCode(str, Enum):
    """Machine-readable error codes for every error imgcast can raise."""

    UNCONFIGURED = "UNCONFIGURED"
    NOT_FOUND = "NOT_FOUND"
    INVALID_RESOURCE = "INVALID_RESOURCE"
    STORAGE_ERROR = "STORAGE_ERROR"
    TRANSPORT_ERROR = "TRANSPORT_ERROR"
    REMOTE_REJECTED = "REMOTE_REJECTED"


# ---------------------------------------------------------------------------
# Base error
# ---------------------------------------------------------------------------

class ImgcastError(Exception):
    """Base exception for all imgcast errors.

    Parameters
    ----------
    code:
        A value from :class:`ErrorCode` (or any string) identifying the
        error category.
    message:
        A developer-friendly description of what went wrong.
    context:
        Arbitrary structured data providing extra diagnostic detail.
        Keys and expected types are documented per subclass.
    cause:
        The underlying exception, if this error wraps another.
    """

    def __init__(
        self,
        code: str,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.code: str = code
        self.message: str = message
        self.context: dict[str, Any] = context or {}
        self.cause: Exception | None = cause
        super().__init__(message)
        if cause is not None:
            self.__cause__ = cause

    def __repr__(self) -> str:
        ctx = f", context={self.context!r}" if self.context else ""
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r}{ctx})"


# ---------------------------------------------------------------------------
# Precondition and resolution errors
# ---------------------------------------------------------------------------

class ImgcastUnconfiguredError(ImgcastError):
    """No webhook URL is configured.

    Context keys: none.
    """

    def __init__(
        self,
        message: str = "No webhook URL configured",
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.UNCONFIGURED,
            message=message,
            context=context,
            cause=cause,
        )


class ImgcastNotFoundError(ImgcastError):
    """No strategy resolved the address to a valid image resource.

    Context keys: ``address``, ``strategies``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.NOT_FOUND,
            message=message,
            context=context,
            cause=cause,
        )


class ImgcastInvalidResourceError(ImgcastError):
    """A resource handle was built for something that is not an image.

    Context keys: ``path``, ``extension``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.INVALID_RESOURCE,
            message=message,
            context=context,
            cause=cause,
        )


# ---------------------------------------------------------------------------
# I/O errors
# ---------------------------------------------------------------------------

class ImgcastStorageError(ImgcastError):
    """Reading a resource from storage failed.

    Context keys: ``path``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.STORAGE_ERROR,
            message=message,
            context=context,
            cause=cause,
        )


class ImgcastTransportError(ImgcastError):
    """A transport-level failure occurred (timeout, DNS, connection refused).

    Context keys: ``url`` (redacted).
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.TRANSPORT_ERROR,
            message=message,
            context=context,
            cause=cause,
        )


class ImgcastRemoteRejectedError(ImgcastError):
    """The webhook answered with a non-2xx status.

    Context keys: ``status_code``, ``body``, ``filename``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.REMOTE_REJECTED,
            message=message,
            context=context,
            cause=cause,
        )
