"""Content-Type and Accept header classification.

This module maps the raw value of a single ``Content-Type`` or
``Accept`` header onto a :class:`FormatTag`. Matching is by prefix on
the lower-cased value so trailing parameters such as ``; charset=UTF-8``
are tolerated. The functions here never raise: anything that does not
name an enabled format yields ``FormatTag.UNRECOGNIZED``.
"""

from typing import Any, Mapping, Optional, Tuple, Union

from .types import (
    JSON_MEDIA_TYPE,
    PROTOBUF_MEDIA_TYPE,
    TEXT_XML_MEDIA_TYPE,
    XML_MEDIA_TYPE,
    FormatRegistry,
    FormatTag,
)


CONTENT_TYPE_HEADER = "Content-Type"
ACCEPT_HEADER = "Accept"

HeaderValue = Union[str, bytes, None]

# First match wins.
_PREFIXES: Tuple[Tuple[Tuple[str, ...], FormatTag], ...] = (
    ((JSON_MEDIA_TYPE,), FormatTag.JSON),
    ((PROTOBUF_MEDIA_TYPE,), FormatTag.PROTOBUF),
    ((XML_MEDIA_TYPE, TEXT_XML_MEDIA_TYPE), FormatTag.XML),
)


def _header_text(value: HeaderValue) -> Optional[str]:
    """Decode a header value, or None when it is not visible ASCII.

    Only visible ASCII, space and horizontal tab are accepted, as HTTP
    header values carrying anything else are treated as unparsable.
    """
    if value is None:
        return None
    if isinstance(value, (bytes, bytearray)):
        try:
            value = bytes(value).decode("ascii")
        except UnicodeDecodeError:
            return None
    if not isinstance(value, str):
        return None
    for ch in value:
        if ch != "\t" and not (" " <= ch <= "~"):
            return None
    return value


def resolve_format(value: HeaderValue, registry: FormatRegistry) -> FormatTag:
    """Classify one header value as a wire format.

    :param value: Raw ``Content-Type`` or ``Accept`` value, or None
    :type value: Union[str, bytes, None]
    :param registry: Formats enabled for this process
    :type registry: FormatRegistry
    :return: The matching enabled format, or ``UNRECOGNIZED``
    :rtype: FormatTag
    """
    text = _header_text(value)
    if text is None:
        return FormatTag.UNRECOGNIZED

    lowered = text.strip().lower()
    for prefixes, tag in _PREFIXES:
        if lowered.startswith(prefixes):
            # A known MIME type for a disabled format does not fall through
            # to later prefixes.
            return tag if registry.is_enabled(tag) else FormatTag.UNRECOGNIZED
    return FormatTag.UNRECOGNIZED


def header_value(headers: Optional[Mapping[str, Any]], name: str) -> HeaderValue:
    """Look up a header case-insensitively in any mapping.

    Case-insensitive mappings such as Starlette's ``Headers`` are queried
    directly; plain dictionaries are scanned.

    :param headers: Request header mapping, or None
    :param name: Header name
    :return: The header value, or None if absent
    """
    if not headers:
        return None
    value = headers.get(name)
    if value is not None:
        return value
    wanted = name.lower()
    for key, val in headers.items():
        if isinstance(key, bytes):
            key = key.decode("latin-1")
        if key.lower() == wanted:
            return val
    return None


def format_from_content_type(
    headers: Optional[Mapping[str, Any]], registry: FormatRegistry
) -> FormatTag:
    """Classify the ``Content-Type`` header of a request."""
    return resolve_format(header_value(headers, CONTENT_TYPE_HEADER), registry)


def format_from_accept(
    headers: Optional[Mapping[str, Any]], registry: FormatRegistry
) -> FormatTag:
    """Classify the ``Accept`` header of a request."""
    return resolve_format(header_value(headers, ACCEPT_HEADER), registry)


__all__ = [
    "ACCEPT_HEADER",
    "CONTENT_TYPE_HEADER",
    "resolve_format",
    "header_value",
    "format_from_content_type",
    "format_from_accept",
]
