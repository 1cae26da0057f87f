"""Structured exception classes for multiresponse."""

import json
from typing import Any, Dict, Optional


class MultiResponseError(Exception):
    """Base exception for all multiresponse errors.

    This exception serves as the parent class for every error raised
    while negotiating formats or (de)serializing payloads, providing a
    consistent interface for error handling in host applications.

    :param message: Human-readable error message
    :param code: Optional error code for programmatic handling
    :param details: Optional dictionary containing additional error context
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        """Initialize the exception with message, code, and details."""
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary format.

        :return: Dictionary containing error code, message, and details
        """
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }

    def to_json(self) -> str:
        """Convert exception to JSON string.

        :return: JSON-encoded string representation of the exception
        """
        return json.dumps(self.to_dict())


class ConfigurationError(MultiResponseError):
    """Raised for configuration-related errors.

    This exception is raised when the set of enabled formats is empty,
    when the configured default format is not enabled, or when a format
    name cannot be understood. It is a startup fault, never a
    per-request condition.

    :param message: Description of the configuration error
    :param setting: Optional name of the problematic setting
    """

    def __init__(self, message: str, setting: Optional[str] = None):
        """Initialize configuration error with message and optional setting."""
        details = {}
        if setting:
            details["setting"] = setting
        super().__init__(message=message, code="CONFIGURATION_ERROR", details=details)


class PayloadError(MultiResponseError):
    """Raised when a request payload cannot be extracted.

    Every payload error is a client error and maps to HTTP 400.

    :param message: Description of the payload error
    :param code: Optional error code
    :param details: Optional additional context
    """

    status_code = 400

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        """Initialize payload error with message, code, and details."""
        super().__init__(message=message, code=code or "PAYLOAD_ERROR", details=details)


class InvalidContentTypeError(PayloadError):
    """Raised when the request ``Content-Type`` is missing or not enabled.

    :param content_type: Optional raw header value that was rejected
    """

    def __init__(self, content_type: Optional[str] = None):
        """Initialize invalid content type error with the rejected value."""
        details = {}
        if content_type is not None:
            details["content_type"] = content_type
        super().__init__(
            message="Invalid content type",
            code="INVALID_CONTENT_TYPE",
            details=details,
        )
        self.content_type = content_type


class PayloadReadError(PayloadError):
    """Raised when the request body stream fails before end-of-stream.

    :param original_error: The exception raised by the body stream
    """

    def __init__(self, original_error: Exception):
        """Initialize payload read error wrapping the stream failure."""
        super().__init__(
            message=f"Payload error: {original_error}",
            code="PAYLOAD_READ_ERROR",
            details={
                "original_error": str(original_error),
                "error_type": type(original_error).__name__,
            },
        )
        self.original_error = original_error


class DeserializeError(PayloadError):
    """Raised when a classified request body fails to decode.

    :param message: Description of the decode failure
    :param format_name: Optional name of the wire format that failed
    :param original_error: Optional codec exception that caused the failure
    """

    def __init__(
        self,
        message: str = "Unable to deserialize",
        format_name: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        """Initialize deserialize error with format and codec context."""
        details: Dict[str, Any] = {}
        if format_name:
            details["format"] = format_name
        if original_error is not None:
            details["original_error"] = str(original_error)
            details["error_type"] = type(original_error).__name__
        super().__init__(message=message, code="DESERIALIZE_ERROR", details=details)
        self.format_name = format_name
        self.original_error = original_error


class JsonDeserializeError(DeserializeError):
    """Raised when a body is not valid JSON for the target type."""

    def __init__(self, original_error: Exception):
        super().__init__(
            message=f"Failed to deserialize from JSON: {original_error}",
            format_name="json",
            original_error=original_error,
        )


class ProtobufDeserializeError(DeserializeError):
    """Raised when a body is not a valid protobuf message for the target type."""

    def __init__(self, original_error: Exception):
        super().__init__(
            message=f"Failed to decode from protobuf: {original_error}",
            format_name="protobuf",
            original_error=original_error,
        )


class XmlDeserializeError(DeserializeError):
    """Raised when a body is not valid XML for the target type."""

    def __init__(self, original_error: Exception):
        super().__init__(
            message=f"Failed to deserialize from XML: {original_error}",
            format_name="xml",
            original_error=original_error,
        )


class DeserializeUnsupportedError(DeserializeError):
    """Raised when the requested format is unrecognized or not available."""

    def __init__(self, format_name: Optional[str] = None):
        super().__init__(message="Unable to deserialize", format_name=format_name)
        self.code = "DESERIALIZE_UNSUPPORTED"


class SerializeError(MultiResponseError):
    """Raised when a response payload fails to encode.

    Serialization failures are server errors and map to HTTP 500.

    :param message: Description of the encode failure
    :param format_name: Optional name of the wire format that failed
    :param original_error: Optional codec exception that caused the failure
    """

    status_code = 500

    def __init__(
        self,
        message: str = "Unable to serialize",
        format_name: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        """Initialize serialize error with format and codec context."""
        details: Dict[str, Any] = {}
        if format_name:
            details["format"] = format_name
        if original_error is not None:
            details["original_error"] = str(original_error)
            details["error_type"] = type(original_error).__name__
        super().__init__(message=message, code="SERIALIZE_ERROR", details=details)
        self.format_name = format_name
        self.original_error = original_error


class JsonSerializeError(SerializeError):
    """Raised when a value cannot be encoded as JSON."""

    def __init__(self, original_error: Exception):
        super().__init__(
            message=f"Failed to serialize to JSON: {original_error}",
            format_name="json",
            original_error=original_error,
        )


class ProtobufSerializeError(SerializeError):
    """Raised when a value cannot be encoded as a protobuf message."""

    def __init__(self, original_error: Exception):
        super().__init__(
            message=f"Failed to encode to protobuf: {original_error}",
            format_name="protobuf",
            original_error=original_error,
        )


class XmlSerializeError(SerializeError):
    """Raised when a value cannot be encoded as XML."""

    def __init__(self, original_error: Exception):
        super().__init__(
            message=f"Failed to serialize to XML: {original_error}",
            format_name="xml",
            original_error=original_error,
        )


class SerializeUnsupportedError(SerializeError):
    """Raised when the negotiated format is unrecognized or not available."""

    def __init__(self, format_name: Optional[str] = None):
        super().__init__(message="Unable to serialize", format_name=format_name)
        self.code = "SERIALIZE_UNSUPPORTED"
