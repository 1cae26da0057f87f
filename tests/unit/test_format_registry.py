"""Unit tests for the format registry.

This module tests default-format selection, validation of the enabled
format set, and construction from settings.
"""

import pytest

from multiresponse.config import Settings
from multiresponse.exceptions import ConfigurationError
from multiresponse.media import FormatRegistry, FormatTag, parse_format


def test_default_follows_priority_order():
    assert FormatRegistry.of(["xml", "protobuf", "json"]).default is FormatTag.JSON
    assert FormatRegistry.of(["xml", "protobuf"]).default is FormatTag.PROTOBUF
    assert FormatRegistry.of(["xml"]).default is FormatTag.XML


def test_default_with_nothing_enabled_is_unrecognized(no_formats):
    assert no_formats.default is FormatTag.UNRECOGNIZED


def test_explicit_default_overrides_priority():
    reg = FormatRegistry.of(["json", "xml"], default="xml")
    assert reg.default is FormatTag.XML


def test_ordered_is_priority_order():
    reg = FormatRegistry.of([FormatTag.XML, FormatTag.JSON])
    assert reg.ordered() == (FormatTag.JSON, FormatTag.XML)


def test_validate_rejects_empty_registry(no_formats):
    with pytest.raises(ConfigurationError) as exc:
        no_formats.validate()
    assert exc.value.details["setting"] == "enabled_formats"


def test_validate_rejects_disabled_default():
    reg = FormatRegistry.of(["json"], default="protobuf")
    with pytest.raises(ConfigurationError) as exc:
        reg.validate()
    assert exc.value.details["setting"] == "default_format"


def test_parse_format_rejects_unknown_names():
    assert parse_format(" JSON ") is FormatTag.JSON
    with pytest.raises(ConfigurationError):
        parse_format("yaml")
    with pytest.raises(ConfigurationError):
        parse_format(FormatTag.UNRECOGNIZED)


def test_from_settings_builds_validated_registry():
    reg = FormatRegistry.from_settings(Settings(enabled_formats=["xml", "json"]))
    assert reg.enabled == frozenset({FormatTag.JSON, FormatTag.XML})
    assert reg.default is FormatTag.JSON


def test_from_settings_refuses_zero_formats():
    with pytest.raises(ConfigurationError):
        FormatRegistry.from_settings(Settings(enabled_formats=[]))


def test_media_types_are_canonical():
    assert FormatTag.JSON.media_type == "application/json"
    assert FormatTag.PROTOBUF.media_type == "application/protobuf"
    assert FormatTag.XML.media_type == "application/xml"
    assert FormatTag.UNRECOGNIZED.media_type is None
