"""
parallai: async client for OpenAI-compatible APIs, with parallel lookups.

- Typed request and response objects for every endpoint
- JSON and multipart (file upload) requests
- Bounded concurrent fan-out with results in input order
- Saving generated images to local files

Example:
    >>> from parallai import Client, ClientConfig
    >>> from parallai.api import ChatCompletionRequest, ChatMessage
    >>>
    >>> async with Client(ClientConfig(api_key="sk-...")) as client:
    ...     response = await client.chat_completion(
    ...         ChatCompletionRequest(
    ...             model="gpt-4o-mini",
    ...             messages=[ChatMessage(role="user", content="Hello!")],
    ...         )
    ...     )
    ...     print(response.text())
"""

from parallai.client import Client, new_client
from parallai.core.fanout import fan_out, fan_out_settled
from parallai.core.models import ClientConfig, Outcome
from parallai.errors import (
    ArtifactWriteFailed,
    ConfigurationInvalid,
    DecodingFailed,
    ErrorDetails,
    InvalidBaseURL,
    MultipartEncodingFailed,
    ParallaiError,
    RemoteError,
    RequestTimedOut,
    SerializationFailed,
    TransportError,
    ValidationFailed,
)
from parallai.utils import url_build

__version__ = "0.1.0"

__all__ = [
    # Client
    "Client",
    "ClientConfig",
    "new_client",
    # Fan-out
    "fan_out",
    "fan_out_settled",
    "Outcome",
    # Utilities
    "url_build",
    # Errors
    "ParallaiError",
    "ConfigurationInvalid",
    "ValidationFailed",
    "InvalidBaseURL",
    "SerializationFailed",
    "MultipartEncodingFailed",
    "TransportError",
    "RequestTimedOut",
    "RemoteError",
    "ErrorDetails",
    "DecodingFailed",
    "ArtifactWriteFailed",
    # Version
    "__version__",
]
