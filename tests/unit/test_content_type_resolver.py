"""Unit tests for content type resolution.

This module tests how single ``Content-Type`` / ``Accept`` values are
classified into wire formats, including parameters, case, disabled
formats and unparsable values.
"""

import pytest

from multiresponse.media import (
    FormatRegistry,
    FormatTag,
    format_from_accept,
    format_from_content_type,
    header_value,
    resolve_format,
)


@pytest.mark.parametrize(
    "value",
    ["application/json", "application/json; charset=UTF-8", "APPLICATION/JSON"],
)
def test_json_variants(value, all_formats):
    assert resolve_format(value, all_formats) is FormatTag.JSON


@pytest.mark.parametrize(
    "value", ["application/protobuf", "application/protobuf; charset=UTF-8"]
)
def test_protobuf_variants(value, all_formats):
    assert resolve_format(value, all_formats) is FormatTag.PROTOBUF


@pytest.mark.parametrize(
    "value", ["application/xml", "application/xml; charset=UTF-8", "text/xml"]
)
def test_xml_variants(value, all_formats):
    assert resolve_format(value, all_formats) is FormatTag.XML


def test_other_and_missing_are_unrecognized(all_formats):
    assert resolve_format("foo/bar", all_formats) is FormatTag.UNRECOGNIZED
    assert resolve_format(None, all_formats) is FormatTag.UNRECOGNIZED
    assert resolve_format("", all_formats) is FormatTag.UNRECOGNIZED


def test_disabled_format_is_unrecognized():
    only_protobuf = FormatRegistry.of(["protobuf"])
    assert resolve_format("application/json", only_protobuf) is FormatTag.UNRECOGNIZED
    assert resolve_format("application/protobuf", only_protobuf) is FormatTag.PROTOBUF


def test_xml_disabled_by_default(default_formats):
    assert resolve_format("text/xml", default_formats) is FormatTag.UNRECOGNIZED


def test_bytes_values(all_formats):
    assert resolve_format(b"application/json", all_formats) is FormatTag.JSON
    assert resolve_format(b"application/json\xff", all_formats) is FormatTag.UNRECOGNIZED


def test_non_visible_ascii_is_unparsable(all_formats):
    assert resolve_format("application/json\x00", all_formats) is FormatTag.UNRECOGNIZED
    assert resolve_format("application/jsön", all_formats) is FormatTag.UNRECOGNIZED


def test_prefix_match_is_on_whole_value(all_formats):
    # Only the leading media type is considered.
    assert resolve_format("application/json, text/plain", all_formats) is FormatTag.JSON
    assert resolve_format("text/html, application/json", all_formats) is FormatTag.UNRECOGNIZED


def test_header_value_is_case_insensitive_for_plain_dicts():
    headers = {"content-type": "application/json", "ACCEPT": "application/xml"}
    assert header_value(headers, "Content-Type") == "application/json"
    assert header_value(headers, "Accept") == "application/xml"
    assert header_value(headers, "X-Missing") is None
    assert header_value(None, "Accept") is None


def test_header_wrappers(all_formats):
    headers = {"Content-Type": "application/protobuf", "Accept": "text/xml"}
    assert format_from_content_type(headers, all_formats) is FormatTag.PROTOBUF
    assert format_from_accept(headers, all_formats) is FormatTag.XML
