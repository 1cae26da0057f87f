"""JSON codec backed by pydantic."""

from typing import Any, Optional

from pydantic import TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError

from ..exceptions import JsonDeserializeError, JsonSerializeError
from ..media.types import JSON_MEDIA_TYPE, FormatTag


class JsonCodec:
    """Encode and decode one application type as JSON.

    Works for any type pydantic can validate: models, dataclasses,
    typed dicts and plain containers.

    :param model: Application type
    :param indent: Indentation for output, or None for compact output
    :raises pydantic.PydanticSchemaGenerationError: If pydantic cannot
        build a schema for the type
    """

    format = FormatTag.JSON
    media_type = JSON_MEDIA_TYPE

    def __init__(self, model: Any, indent: Optional[int] = 2):
        self.model = model
        self.indent = indent
        self._adapter = TypeAdapter(model)

    def encode(self, value: Any) -> bytes:
        try:
            return self._adapter.dump_json(value, indent=self.indent)
        except (PydanticSerializationError, TypeError, ValueError) as e:
            raise JsonSerializeError(e) from e

    def decode(self, data: bytes) -> Any:
        try:
            return self._adapter.validate_json(data)
        except ValidationError as e:
            raise JsonDeserializeError(e) from e
