import sys
from pathlib import Path
from typing import ClassVar, List

import pytest
from google.protobuf import descriptor_pb2, descriptor_pool, message_factory
from pydantic import BaseModel, Field

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from multiresponse.media import FormatRegistry, FormatTag  # noqa: E402


def pytest_configure(config):
    # Register the asyncio marker so pytest doesn't warn when it's used.
    config.addinivalue_line(
        "markers", "asyncio: mark test to run in an asyncio event loop"
    )
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )


def _build_message_classes():
    """Build the test protobuf messages without a protoc step."""
    field = descriptor_pb2.FieldDescriptorProto
    file_proto = descriptor_pb2.FileDescriptorProto(
        name="multiresponse_test.proto",
        package="multiresponse.test",
        syntax="proto3",
    )

    sample = file_proto.message_type.add(name="SampleMessage")
    sample.field.add(
        name="foo", number=1, type=field.TYPE_STRING, label=field.LABEL_OPTIONAL
    )
    sample.field.add(
        name="bar", number=2, type=field.TYPE_INT64, label=field.LABEL_OPTIONAL
    )

    tagged = file_proto.message_type.add(name="TaggedMessage")
    tagged.field.add(
        name="name", number=1, type=field.TYPE_STRING, label=field.LABEL_OPTIONAL
    )
    tagged.field.add(
        name="tags", number=2, type=field.TYPE_STRING, label=field.LABEL_REPEATED
    )

    pool = descriptor_pool.DescriptorPool()
    pool.AddSerializedFile(file_proto.SerializeToString())
    return (
        message_factory.GetMessageClass(
            pool.FindMessageTypeByName("multiresponse.test.SampleMessage")
        ),
        message_factory.GetMessageClass(
            pool.FindMessageTypeByName("multiresponse.test.TaggedMessage")
        ),
    )


SampleMessage, TaggedMessage = _build_message_classes()


class SamplePayload(BaseModel):
    """The foo/bar payload used throughout the suite."""

    __protobuf_message__: ClassVar[type] = SampleMessage

    foo: str = ""
    bar: int = 0


class TaggedPayload(BaseModel):
    __protobuf_message__: ClassVar[type] = TaggedMessage

    name: str = ""
    tags: List[str] = Field(default_factory=list)


class JsonOnlyPayload(BaseModel):
    """Payload without a protobuf binding."""

    value: str = ""


@pytest.fixture(autouse=True)
def mock_env_vars(monkeypatch):
    """Keep ambient configuration out of the tests."""
    monkeypatch.delenv("MULTIRESPONSE_ENABLED_FORMATS", raising=False)
    monkeypatch.delenv("MULTIRESPONSE_DEFAULT_FORMAT", raising=False)
    monkeypatch.delenv("MULTIRESPONSE_JSON_INDENT", raising=False)
    yield


@pytest.fixture
def sample_model():
    return SamplePayload


@pytest.fixture
def tagged_model():
    return TaggedPayload


@pytest.fixture
def json_only_model():
    return JsonOnlyPayload


@pytest.fixture
def sample_message():
    return SampleMessage


@pytest.fixture
def all_formats():
    """Registry with every wire format enabled."""
    return FormatRegistry.of([FormatTag.JSON, FormatTag.PROTOBUF, FormatTag.XML])


@pytest.fixture
def default_formats():
    """Registry matching the default settings (JSON and protobuf)."""
    return FormatRegistry.of([FormatTag.JSON, FormatTag.PROTOBUF])


@pytest.fixture
def no_formats():
    return FormatRegistry.of([])


# Rely on pytest-asyncio for async test handling; no custom hook needed.
