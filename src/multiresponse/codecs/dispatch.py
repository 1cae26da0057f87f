"""Routing of typed values through the codec for a negotiated format.

A :class:`CodecDispatcher` holds, for one application type, the table
from :class:`FormatTag` to the codec able to carry that type. The table
is built once per (type, registry) pair and reused for every request.
Formats that are disabled, unrecognized, or that the type cannot be
carried in are absent from the table; asking for them raises the
``Unsupported`` errors without touching any codec.
"""

import logging
from functools import lru_cache
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from pydantic import PydanticUserError

from ..exceptions import DeserializeUnsupportedError, SerializeUnsupportedError
from ..media.types import FormatRegistry, FormatTag
from .base import Codec, SerializedBody
from .json import JsonCodec
from .protobuf import ProtobufCodec
from .xml import XmlCodec

logger = logging.getLogger(__name__)

CodecFactory = Callable[[Any], Codec]


class CodecDispatcher:
    """Codec table for one application type.

    :param model: Application type carried by the codecs
    :param registry: Formats enabled for this process
    :param codecs: Mapping from enabled format to codec
    """

    def __init__(
        self,
        model: Any,
        registry: FormatRegistry,
        codecs: Mapping[FormatTag, Codec],
    ):
        self.model = model
        self.registry = registry
        self._codecs: Dict[FormatTag, Codec] = {
            tag: codec for tag, codec in codecs.items() if registry.is_enabled(tag)
        }

    @classmethod
    def build(
        cls,
        model: Any,
        registry: FormatRegistry,
        *,
        json_indent: Optional[int] = 2,
        factories: Optional[Mapping[FormatTag, CodecFactory]] = None,
    ) -> "CodecDispatcher":
        """Build the codec table for ``model``.

        Each enabled format's factory is tried in priority order. A format
        whose codec cannot be built for the type (for example protobuf for
        a model without a message binding) is left out of the table.

        :param model: Application type
        :param registry: Formats enabled for this process
        :param json_indent: Indentation for JSON output
        :param factories: Optional per-format codec factories overriding
            the defaults
        :return: Dispatcher for the type
        """
        table: Dict[FormatTag, CodecFactory] = {
            FormatTag.JSON: lambda m: JsonCodec(m, indent=json_indent),
            FormatTag.PROTOBUF: ProtobufCodec,
            FormatTag.XML: XmlCodec,
        }
        if factories:
            table.update(factories)

        codecs: Dict[FormatTag, Codec] = {}
        for tag in registry.ordered():
            factory = table.get(tag)
            if factory is None:
                continue
            try:
                codecs[tag] = factory(model)
            except (TypeError, PydanticUserError) as e:
                logger.debug("No %s codec for %r: %s", tag.value, model, e)
        logger.debug(
            "Codec table for %r: %s",
            model,
            ", ".join(t.value for t in codecs) or "<empty>",
        )
        return cls(model, registry, codecs)

    @classmethod
    def for_type(
        cls,
        model: Any,
        registry: FormatRegistry,
        *,
        json_indent: Optional[int] = 2,
    ) -> "CodecDispatcher":
        """Return the cached dispatcher for ``model`` and ``registry``."""
        return _cached_dispatcher(model, registry, json_indent)

    @property
    def formats(self) -> Tuple[FormatTag, ...]:
        """Formats this dispatcher can carry, in priority order."""
        return tuple(t for t in self.registry.ordered() if t in self._codecs)

    def supports(self, fmt: FormatTag) -> bool:
        return fmt in self._codecs

    def codec(self, fmt: FormatTag) -> Optional[Codec]:
        return self._codecs.get(fmt)

    def deserialize(self, data: bytes, fmt: FormatTag) -> Any:
        """Decode ``data`` as ``fmt`` into the application type.

        :param data: Complete request body
        :param fmt: Classified request format
        :return: Decoded value
        :raises DeserializeUnsupportedError: If ``fmt`` has no codec here
        :raises DeserializeError: If the codec rejects the bytes
        """
        codec = self._codecs.get(fmt)
        if codec is None:
            raise DeserializeUnsupportedError(fmt.value)
        return codec.decode(bytes(data))

    def serialize(self, value: Any, fmt: FormatTag) -> SerializedBody:
        """Encode ``value`` as ``fmt``.

        :param value: Value of the application type
        :param fmt: Negotiated response format
        :return: Encoded body and its canonical MIME type
        :raises SerializeUnsupportedError: If ``fmt`` has no codec here
        :raises SerializeError: If the codec cannot encode the value
        """
        codec = self._codecs.get(fmt)
        if codec is None:
            raise SerializeUnsupportedError(fmt.value)
        return SerializedBody(content=codec.encode(value), media_type=codec.media_type)


@lru_cache(maxsize=256)
def _cached_dispatcher(
    model: Any, registry: FormatRegistry, json_indent: Optional[int]
) -> CodecDispatcher:
    return CodecDispatcher.build(model, registry, json_indent=json_indent)


__all__ = ["CodecDispatcher", "CodecFactory"]
