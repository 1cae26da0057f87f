"""Codec contract shared by every wire format."""

from dataclasses import dataclass
from typing import Any, Protocol as TypingProtocol

from ..media.types import FormatTag


class Codec(TypingProtocol):
    """Paired encode/decode routine for one wire format and one type."""

    format: FormatTag
    media_type: str

    def encode(self, value: Any) -> bytes: ...

    def decode(self, data: bytes) -> Any: ...


@dataclass(frozen=True)
class SerializedBody:
    """Encoded response body and the MIME type to send it with."""

    content: bytes
    media_type: str
