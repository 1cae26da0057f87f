"""Content-negotiated request/response payloads.

This package lets one typed payload be received and sent as JSON,
Protocol Buffers or XML, chosen from the ``Content-Type`` and ``Accept``
headers. The enabled formats are configured once at startup.

:var __version__: Current package version
:type __version__: str
"""

from .codecs import CodecDispatcher, SerializedBody
from .config import Settings, settings
from .exceptions import (
    ConfigurationError,
    DeserializeError,
    DeserializeUnsupportedError,
    InvalidContentTypeError,
    JsonDeserializeError,
    JsonSerializeError,
    MultiResponseError,
    PayloadError,
    PayloadReadError,
    ProtobufDeserializeError,
    ProtobufSerializeError,
    SerializeError,
    SerializeUnsupportedError,
    XmlDeserializeError,
    XmlSerializeError,
)
from .media import (
    ContentNegotiator,
    FormatRegistry,
    FormatTag,
    resolve_format,
    select_response_format,
)
from .payload import Payload, ResponseParts, build_response, extract_payload

__version__ = "0.4.2"

__all__ = [
    "Payload",
    "ResponseParts",
    "extract_payload",
    "build_response",
    "FormatTag",
    "FormatRegistry",
    "ContentNegotiator",
    "resolve_format",
    "select_response_format",
    "CodecDispatcher",
    "SerializedBody",
    "Settings",
    "settings",
    "MultiResponseError",
    "ConfigurationError",
    "PayloadError",
    "InvalidContentTypeError",
    "PayloadReadError",
    "DeserializeError",
    "JsonDeserializeError",
    "ProtobufDeserializeError",
    "XmlDeserializeError",
    "DeserializeUnsupportedError",
    "SerializeError",
    "JsonSerializeError",
    "ProtobufSerializeError",
    "XmlSerializeError",
    "SerializeUnsupportedError",
]
