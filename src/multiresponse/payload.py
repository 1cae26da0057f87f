"""Typed payload wrapper and the extract/respond operations.

:class:`Payload` wraps exactly one value of an application type and is
used as both the request and the response payload. The format used on
the wire is chosen from the ``Content-Type`` and ``Accept`` headers:

- when extracting, only ``Content-Type`` is consulted and a missing or
  unrecognized value is rejected before the body is read;
- when responding, ``Accept`` is checked first, then ``Content-Type``,
  and when neither names an enabled format the configured default is
  used.
"""

import copy
import logging
from typing import (
    Any,
    AsyncIterable,
    Iterable,
    Generic,
    Mapping,
    NamedTuple,
    Optional,
    TypeVar,
    Union,
)

from .codecs import CodecDispatcher, SerializedBody
from .config.settings import Settings
from .config.settings import settings as default_settings
from .exceptions import (
    ConfigurationError,
    DeserializeError,
    InvalidContentTypeError,
    PayloadError,
    PayloadReadError,
    SerializeError,
)
from .media import (
    CONTENT_TYPE_HEADER,
    ContentNegotiator,
    FormatRegistry,
    FormatTag,
    header_value,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

ERROR_MEDIA_TYPE = "text/plain; charset=utf-8"

BodyStream = Union[bytes, bytearray, AsyncIterable[bytes], Iterable[bytes]]


class ResponseParts(NamedTuple):
    """Transport-neutral response for the host framework to send."""

    status_code: int
    media_type: str
    body: bytes


def get_dispatcher(
    model: Any,
    *,
    registry: Optional[FormatRegistry] = None,
    settings: Optional[Settings] = None,
) -> CodecDispatcher:
    """Return the cached codec dispatcher for ``model``.

    :param model: Application type
    :param registry: Optional registry; built from settings when omitted
    :param settings: Optional settings; the global settings when omitted
    :return: Dispatcher for the type
    :raises ConfigurationError: If the settings enable no format
    """
    settings = settings or default_settings
    if registry is None:
        registry = FormatRegistry.from_settings(settings)
    return CodecDispatcher.for_type(model, registry, json_indent=settings.json_indent)


class Payload(Generic[T]):
    """Wrapper owning one value of an application type.

    The inner value is reached through explicit accessors: :meth:`borrow`
    for the live value, :meth:`get` for an independent copy, and
    :meth:`set` to replace it.

    :param value: The wrapped value
    :param model: Application type used to pick codecs; defaults to the
        value's own type
    """

    __slots__ = ("_value", "model")

    def __init__(self, value: T, model: Optional[Any] = None):
        self._value = value
        self.model = model if model is not None else type(value)

    @classmethod
    def default(cls, model: Any) -> "Payload":
        """Wrap a default-constructed value of ``model``."""
        return cls(model(), model=model)

    def borrow(self) -> T:
        """The inner value itself; mutations are visible to the payload."""
        return self._value

    def get(self) -> T:
        """A deep copy of the inner value."""
        return copy.deepcopy(self._value)

    def set(self, value: T) -> None:
        self._value = value

    def into_inner(self) -> T:
        """Consume the payload and return its value."""
        value = self._value
        self._value = None
        return value

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Payload):
            return self._value == other._value
        return NotImplemented

    def __repr__(self) -> str:
        return f"Payload({self._value!r})"

    @classmethod
    def deserialize(
        cls,
        data: bytes,
        fmt: FormatTag,
        model: Any,
        *,
        dispatcher: Optional[CodecDispatcher] = None,
        registry: Optional[FormatRegistry] = None,
        settings: Optional[Settings] = None,
    ) -> "Payload":
        """Decode a complete body into a payload.

        :param data: Body bytes
        :param fmt: Format the body is encoded in
        :param model: Application type to decode into
        :return: New payload
        :raises DeserializeError: If the format is unsupported or the body
            does not decode
        """
        if dispatcher is None:
            dispatcher = get_dispatcher(model, registry=registry, settings=settings)
        return cls(dispatcher.deserialize(data, fmt), model=model)

    def serialize(
        self,
        fmt: FormatTag,
        *,
        dispatcher: Optional[CodecDispatcher] = None,
        registry: Optional[FormatRegistry] = None,
        settings: Optional[Settings] = None,
    ) -> SerializedBody:
        """Encode the payload in ``fmt``.

        :param fmt: Format to encode in
        :return: Encoded body and its canonical MIME type
        :raises SerializeError: If the format is unsupported or the value
            cannot be encoded
        """
        if dispatcher is None:
            dispatcher = get_dispatcher(self.model, registry=registry, settings=settings)
        return dispatcher.serialize(self._value, fmt)


async def collect_body(stream: BodyStream) -> bytes:
    """Read a request body stream to the end into one buffer.

    :param stream: Async or sync iterable of byte chunks, or the body
        itself
    :return: The complete body
    :raises PayloadReadError: If the stream fails before end-of-stream
    :raises TypeError: If ``stream`` is not iterable
    """
    if isinstance(stream, (bytes, bytearray)):
        return bytes(stream)

    buffer = bytearray()
    if not hasattr(stream, "__aiter__"):
        chunks = iter(stream)
        try:
            for chunk in chunks:
                buffer.extend(chunk)
        except PayloadError:
            raise
        except Exception as e:
            raise PayloadReadError(e) from e
        return bytes(buffer)

    try:
        async for chunk in stream:
            buffer.extend(chunk)
    except PayloadError:
        raise
    except Exception as e:
        raise PayloadReadError(e) from e
    return bytes(buffer)


def _raw_header_str(value: Any) -> Optional[str]:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("latin-1")
    return value


async def extract_payload(
    headers: Optional[Mapping[str, Any]],
    body: BodyStream,
    model: Any,
    *,
    registry: Optional[FormatRegistry] = None,
    settings: Optional[Settings] = None,
) -> Payload:
    """Build a payload from an inbound request.

    The ``Content-Type`` header is classified first; an absent or
    unrecognized value is rejected before any body bytes are read.

    :param headers: Request headers
    :param body: Request body stream
    :param model: Application type to decode into
    :return: Decoded payload
    :raises PayloadError: If the content type is invalid, the body
        cannot be read, or the body does not decode
    """
    dispatcher = get_dispatcher(model, registry=registry, settings=settings)
    raw_content_type = header_value(headers, CONTENT_TYPE_HEADER)
    fmt = ContentNegotiator(dispatcher.registry).request_format(headers)
    if not fmt.is_concrete:
        logger.warning(
            "Rejecting request body with content type %r", raw_content_type
        )
        raise InvalidContentTypeError(_raw_header_str(raw_content_type))

    data = await collect_body(body)
    try:
        return Payload.deserialize(data, fmt, model, dispatcher=dispatcher)
    except DeserializeError as e:
        logger.warning("Rejecting %s request body: %s", fmt.value, e)
        raise


def build_response(
    payload: Payload,
    headers: Optional[Mapping[str, Any]],
    *,
    registry: Optional[FormatRegistry] = None,
    settings: Optional[Settings] = None,
) -> ResponseParts:
    """Render a payload for the request it answers.

    :param payload: Response payload
    :param headers: Headers of the request being answered
    :return: Status code, ``Content-Type`` value and body
    :raises ConfigurationError: If no wire format is enabled
    """
    dispatcher = get_dispatcher(payload.model, registry=registry, settings=settings)
    fmt = ContentNegotiator(dispatcher.registry).response_format(headers)
    if not fmt.is_concrete:
        raise ConfigurationError(
            "At least one wire format must be enabled", setting="enabled_formats"
        )

    try:
        body = payload.serialize(fmt, dispatcher=dispatcher)
    except SerializeError as e:
        logger.error("Failed to serialize %s response: %s", fmt.value, e)
        return ResponseParts(e.status_code, ERROR_MEDIA_TYPE, str(e).encode("utf-8"))
    return ResponseParts(200, body.media_type, body.content)


__all__ = [
    "Payload",
    "ResponseParts",
    "BodyStream",
    "ERROR_MEDIA_TYPE",
    "get_dispatcher",
    "collect_body",
    "extract_payload",
    "build_response",
]
