"""Unit tests for response format negotiation."""

from multiresponse.media import (
    ContentNegotiator,
    FormatRegistry,
    FormatTag,
    select_response_format,
)


def test_accept_wins_over_content_type(default_formats):
    fmt = select_response_format(
        "application/protobuf", "application/json", default_formats
    )
    assert fmt is FormatTag.PROTOBUF


def test_content_type_used_when_accept_missing(default_formats):
    fmt = select_response_format(None, "application/protobuf", default_formats)
    assert fmt is FormatTag.PROTOBUF


def test_content_type_used_when_accept_unrecognized(default_formats):
    fmt = select_response_format("*/*", "application/protobuf", default_formats)
    assert fmt is FormatTag.PROTOBUF


def test_default_when_neither_header_given(default_formats):
    assert select_response_format(None, None, default_formats) is FormatTag.JSON


def test_default_when_both_headers_unrecognized():
    reg = FormatRegistry.of(["protobuf", "xml"])
    assert select_response_format("text/html", "foo/bar", reg) is FormatTag.PROTOBUF


def test_explicit_default_is_used():
    reg = FormatRegistry.of(["json", "xml"], default="xml")
    assert select_response_format(None, None, reg) is FormatTag.XML


def test_disabled_accept_falls_through(default_formats):
    fmt = select_response_format("application/xml", "application/protobuf", default_formats)
    assert fmt is FormatTag.PROTOBUF


def test_nothing_enabled_yields_unrecognized(no_formats):
    fmt = select_response_format("application/json", None, no_formats)
    assert fmt is FormatTag.UNRECOGNIZED


def test_negotiator_uses_only_content_type_for_requests(all_formats):
    negotiator = ContentNegotiator(all_formats)
    headers = {"Accept": "application/xml"}
    assert negotiator.request_format(headers) is FormatTag.UNRECOGNIZED
    assert negotiator.response_format(headers) is FormatTag.XML
    assert negotiator.response_format({}) is FormatTag.JSON
