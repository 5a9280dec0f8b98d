"""
Exception hierarchy for parallai.

Every error raised by the library derives from ParallaiError, so callers can
catch a single base class. Validation errors carry the name of the offending
request field; remote errors carry the HTTP status and the decoded error
payload returned by the API.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping


class ParallaiError(Exception):
    """Base class for all parallai errors."""


class ConfigurationInvalid(ParallaiError):
    """The client is missing credentials, a base URL or another required setting."""


class InvalidBaseURL(ParallaiError, ValueError):
    """The configured base URL cannot be parsed as an absolute http(s) URL."""


class ValidationFailed(ParallaiError, ValueError):
    """
    A request object failed its pre-flight validation.

    Attributes:
        field (str): Wire name of the request field that failed validation
    """

    default_message = "invalid request"

    def __init__(self, field: str, message: str | None = None) -> None:
        self.field = field
        super().__init__(message or self.default_message)


class ModelRequired(ValidationFailed):
    default_message = "model is required"


class PromptRequired(ValidationFailed):
    default_message = "prompt is required"


class MessageRequired(ValidationFailed):
    default_message = "message is required"


class InputRequired(ValidationFailed):
    default_message = "input is required"


class ImageRequired(ValidationFailed):
    default_message = "image is required"


class FileRequired(ValidationFailed):
    default_message = "file is required"


class PurposeRequired(ValidationFailed):
    default_message = "purpose is required"


class InstructionRequired(ValidationFailed):
    default_message = "instruction is required"


class InvalidResponseFormat(ValidationFailed):
    default_message = "invalid response format"


class InvalidSize(ValidationFailed):
    default_message = "invalid size"


class InvalidRole(ValidationFailed):
    default_message = "invalid role"


class SerializationFailed(ParallaiError):
    """A JSON request body could not be serialized."""


class MultipartEncodingFailed(ParallaiError):
    """A multipart/form-data body could not be built (including file read errors)."""


class TransportError(ParallaiError):
    """The request could not be delivered (connection refused, DNS, reset, ...)."""


class RequestTimedOut(TransportError):
    """The request did not complete within the configured timeout."""

    def __init__(self, message: str = "request timed out") -> None:
        super().__init__(message)


class DecodingFailed(ParallaiError):
    """A successful response body could not be decoded into the result type."""


class ArtifactWriteFailed(ParallaiError):
    """A generated image could not be fetched, decoded or written to disk."""


@dataclass
class ErrorDetails:
    """
    Error payload returned by the API under the "error" key.

    Attributes:
        message (str): Human-readable text about the error
        type (str): High level error category
        param (str): Which parameter the error is related to
        code (str): Error code
    """

    message: str = ""
    type: str = ""
    param: str = ""
    code: str = ""

    @classmethod
    def from_payload(cls, payload: Any) -> "ErrorDetails":
        """
        Build details from a decoded `{"error": {...}}` payload.

        Anything that does not have the expected shape yields empty details.
        """
        if not isinstance(payload, Mapping):
            return cls()
        error = payload.get("error")
        if not isinstance(error, Mapping):
            return cls()

        def _text(key: str) -> str:
            value = error.get(key)
            return "" if value is None else str(value)

        return cls(
            message=_text("message"),
            type=_text("type"),
            param=_text("param"),
            code=_text("code"),
        )


class RemoteError(ParallaiError):
    """
    The API answered with a non-success status code.

    Attributes:
        status (int): HTTP status code of the response
        details (ErrorDetails): Decoded error payload (empty if it could not be decoded)
        body (bytes): Raw response body
    """

    def __init__(self, status: int, details: ErrorDetails, body: bytes = b"") -> None:
        self.status = status
        self.details = details
        self.body = body
        super().__init__(f"non-success status code {status}: {details.message}")

    @property
    def message(self) -> str:
        return self.details.message
