"""Webhook URL redaction for safe logging.

A webhook URL is a bearer credential: anyone holding it can post to the
channel.  Before a URL reaches a log line, an error message or a
``repr`` it must go through :func:`redact_url`, which keeps enough of it
to tell endpoints apart and drops the rest:

* scheme and host are kept;
* every path segment except the last is kept;
* the last path segment (the token in ``/api/webhooks/<id>/<token>``) is
  replaced with ``<redacted:...XXXX>`` showing its last four characters;
* query string and fragment are dropped.
"""

from __future__ import annotations

from urllib.parse import urlsplit


def mask_secret(value: str, secret: str | None) -> str:
    """Replace every occurrence of *secret* in *value* with a placeholder."""
    if not secret or secret not in value:
        return value
    suffix = secret[-4:] if len(secret) >= 8 else "****"
    placeholder = f"<redacted:...{suffix}>"
    # A placeholder may not itself contain the secret.
    if secret in placeholder:
        placeholder = "<redacted>"
    return value.replace(secret, placeholder)


def redact_url(url: str | None) -> str:
    """Return *url* with its credential-bearing parts masked.

    Examples
    --------
    >>> redact_url("https://discord.com/api/webhooks/123/abcdefgh1234")
    'https://discord.com/api/webhooks/123/<redacted:...1234>'

    >>> redact_url("")
    ''
    """
    if not url:
        return ""
    try:
        parts = urlsplit(url)
    except ValueError:
        return "<redacted>"
    if not parts.scheme or not parts.netloc:
        return "<redacted>"

    # Drop any userinfo from the authority.
    host = parts.netloc.rsplit("@", 1)[-1]
    segments = parts.path.split("/")
    if segments and segments[-1]:
        segments[-1] = mask_secret(segments[-1], segments[-1])
    path = "/".join(segments)
    return f"{parts.scheme}://{host}{path}"


def scrub_url(text: str, url: str | None) -> str:
    """Mask every trace of *url* (and its token segment) inside *text*.

    Exception messages from the HTTP layer can quote the request URL.
    """
    if not url or not text:
        return text
    text = text.replace(url, redact_url(url))
    try:
        token = urlsplit(url).path.rstrip("/").rsplit("/", 1)[-1]
    except ValueError:
        return text
    return mask_secret(text, token)
