"""Media utilities public API (re-exports)."""

from .negotiator import ContentNegotiator, select_response_format
from .resolver import (
    ACCEPT_HEADER,
    CONTENT_TYPE_HEADER,
    format_from_accept,
    format_from_content_type,
    header_value,
    resolve_format,
)
from .types import (
    FORMAT_PRIORITY,
    JSON_MEDIA_TYPE,
    PROTOBUF_MEDIA_TYPE,
    TEXT_XML_MEDIA_TYPE,
    XML_MEDIA_TYPE,
    FormatRegistry,
    FormatTag,
    parse_format,
)

__all__ = [
    "FormatTag",
    "FormatRegistry",
    "FORMAT_PRIORITY",
    "JSON_MEDIA_TYPE",
    "PROTOBUF_MEDIA_TYPE",
    "XML_MEDIA_TYPE",
    "TEXT_XML_MEDIA_TYPE",
    "parse_format",
    "ACCEPT_HEADER",
    "CONTENT_TYPE_HEADER",
    "resolve_format",
    "header_value",
    "format_from_content_type",
    "format_from_accept",
    "select_response_format",
    "ContentNegotiator",
]
