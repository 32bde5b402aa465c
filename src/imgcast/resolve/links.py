"""Embedded-link extraction from editor text.

Only the inline image form ``![alt](address)`` is recognised.  The first
match in the fragment wins; the captured address is returned verbatim.
"""

from __future__ import annotations

import re

_EMBEDDED_IMAGE_RE = re.compile(r"!\[.*?\]\((.*?)\)")


def extract_embedded_link(text: str | None) -> str | None:
    """Return the address of the first ``![...](...)`` link in *text*.

    Returns ``None`` when the fragment contains no image link, or when
    the captured address is empty.
    """
    if not text:
        return None
    match = _EMBEDDED_IMAGE_RE.search(text)
    if match is None:
        return None
    address = match.group(1)
    return address or None


def has_embedded_link(text: str | None) -> bool:
    return extract_embedded_link(text) is not None
