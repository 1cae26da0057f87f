"""Protocol Buffers codec backed by ``google.protobuf``.

Two kinds of application type are supported:

- generated message classes, encoded and decoded natively;
- pydantic-validatable types (models, dataclasses) bound to a message
  class, either through a ``__protobuf_message__`` class attribute or an
  explicit ``message_type`` argument. Values are converted through
  ``json_format`` using the proto field names.

Bound types should give every field a default, since proto3 omits
fields holding their default value from the wire.
"""

from typing import Any, Optional, Type

from google.protobuf import json_format
from google.protobuf.message import DecodeError, EncodeError, Message
from pydantic import TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError

from ..exceptions import ProtobufDeserializeError, ProtobufSerializeError
from ..media.types import PROTOBUF_MEDIA_TYPE, FormatTag


MESSAGE_ATTRIBUTE = "__protobuf_message__"


def is_message_type(model: Any) -> bool:
    return isinstance(model, type) and issubclass(model, Message)


def message_type_for(model: Any) -> Optional[Type[Message]]:
    """Return the protobuf message class used to carry ``model``, if any."""
    if is_message_type(model):
        return model
    bound = getattr(model, MESSAGE_ATTRIBUTE, None)
    if is_message_type(bound):
        return bound
    return None


class ProtobufCodec:
    """Encode and decode one application type as a protobuf message.

    :param model: Application type
    :param message_type: Optional message class overriding the type's
        ``__protobuf_message__`` binding
    :raises TypeError: If no message class is available for the type
    """

    format = FormatTag.PROTOBUF
    media_type = PROTOBUF_MEDIA_TYPE

    def __init__(self, model: Any, message_type: Optional[Type[Message]] = None):
        self.model = model
        self.message_type = message_type or message_type_for(model)
        if self.message_type is None:
            raise TypeError(f"{model!r} has no protobuf message binding")
        self._native = self.message_type is model
        self._adapter = None if self._native else TypeAdapter(model)

    def encode(self, value: Any) -> bytes:
        try:
            return self._to_message(value).SerializeToString()
        except (
            EncodeError,
            json_format.ParseError,
            PydanticSerializationError,
            TypeError,
            ValueError,
        ) as e:
            raise ProtobufSerializeError(e) from e

    def decode(self, data: bytes) -> Any:
        try:
            message = self.message_type.FromString(data)
        except DecodeError as e:
            raise ProtobufDeserializeError(e) from e
        if self._native:
            return message

        fields = json_format.MessageToDict(message, preserving_proto_field_name=True)
        try:
            return self._adapter.validate_python(fields)
        except ValidationError as e:
            raise ProtobufDeserializeError(e) from e

    def _to_message(self, value: Any) -> Message:
        if self._native:
            if not isinstance(value, self.message_type):
                raise TypeError(
                    f"expected {self.message_type.DESCRIPTOR.full_name}, "
                    f"got {type(value).__name__}"
                )
            return value
        fields = self._adapter.dump_python(value, mode="json", exclude_none=True)
        return json_format.ParseDict(fields, self.message_type())
