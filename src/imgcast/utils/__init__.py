from .redact import mask_secret, redact_url, scrub_url

__all__ = [
    "mask_secret",
    "redact_url",
    "scrub_url",
]
