"""Wire format codecs public API (re-exports)."""

from .base import Codec, SerializedBody
from .dispatch import CodecDispatcher, CodecFactory
from .json import JsonCodec
from .protobuf import MESSAGE_ATTRIBUTE, ProtobufCodec, message_type_for
from .xml import ROOT_ATTRIBUTE, XmlCodec

__all__ = [
    "Codec",
    "SerializedBody",
    "CodecDispatcher",
    "CodecFactory",
    "JsonCodec",
    "ProtobufCodec",
    "XmlCodec",
    "MESSAGE_ATTRIBUTE",
    "ROOT_ATTRIBUTE",
    "message_type_for",
]
