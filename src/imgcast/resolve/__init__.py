"""Resolution of ambiguous image addresses to storage resources.

Exports
-------
ResourceResolver
    Ordered strategy chain from invocation context to resource handle.
parse_address
    Pure decomposition of an opaque rendered address.
extract_embedded_link
    First ``![...](address)`` capture from an editor fragment.
is_image_extension / is_valid_entry
    The validity predicate shared by every strategy.
"""

from .address import parse_address
from .links import extract_embedded_link, has_embedded_link
from .resolver import ResourceResolver
from .validate import is_image_extension, is_valid_entry, to_handle

__all__ = [
    "ResourceResolver",
    "extract_embedded_link",
    "has_embedded_link",
    "is_image_extension",
    "is_valid_entry",
    "parse_address",
    "to_handle",
]
