"""Pure parsing of opaque rendered addresses.

The rendering layer hands out addresses such as
``app://local/attachments/cat.png?1718000000`` or
``https://cdn.example.com/img/cat.png``.  :func:`parse_address` splits
them into a :class:`~imgcast.models.ParsedAddress` without touching
storage, so it can be tested on its own.
"""

from __future__ import annotations

import re
from urllib.parse import unquote, urlsplit

from imgcast.models import ParsedAddress

# Local-resource scheme: ``app://`` optionally followed by the ``local``
# authority.  Whatever follows is a storage path.
_LOCAL_SCHEME_RE = re.compile(r"^app://(?:local(?=/|$))?", re.IGNORECASE)


def _strip_suffixes(value: str) -> str:
    """Drop a query string and fragment (renderer cache-busting suffixes)."""
    for sep in ("?", "#"):
        idx = value.find(sep)
        if idx != -1:
            value = value[:idx]
    return value


def _last_segment(path: str) -> str:
    segments = [s for s in path.split("/") if s]
    return segments[-1] if segments else path


def parse_address(address: str) -> ParsedAddress:
    """Decompose *address* into scheme, path and filename.

    For a recognised local scheme the prefix and one leading ``/`` are
    removed and the remainder is percent-decoded into a storage path::

        >>> parse_address("app://local/abc/def/photo.JPG").path
        'abc/def/photo.JPG'

    Any other address keeps its path, and only ``filename`` (the final
    segment) is meaningful for lookups::

        >>> parse_address("https://example.com/x/cat.png").filename
        'cat.png'
    """
    address = (address or "").strip()

    local = _LOCAL_SCHEME_RE.match(address)
    if local is not None:
        remainder = address[local.end():]
        if remainder.startswith("/"):
            remainder = remainder[1:]
        path = unquote(_strip_suffixes(remainder))
        return ParsedAddress(
            scheme="app",
            path=path,
            filename=_last_segment(path),
            is_local=True,
        )

    parts = urlsplit(address)
    if parts.scheme and parts.netloc:
        path = unquote(parts.path)
    else:
        path = unquote(_strip_suffixes(address))
    return ParsedAddress(
        scheme=parts.scheme.lower() if parts.netloc else "",
        path=path,
        filename=_last_segment(path),
        is_local=False,
    )
