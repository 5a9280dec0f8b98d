from __future__ import annotations

import asyncio
import json
from typing import Any, Protocol, TypeVar

from aiohttp import ClientError, ClientSession, ClientTimeout
from loguru import logger

from parallai.core.marshal import OutboundRequest
from parallai.core.models import REQUEST_TIMEOUT_SECONDS
from parallai.errors import (
    DecodingFailed,
    ErrorDetails,
    RemoteError,
    RequestTimedOut,
    TransportError,
)
from parallai.utils import is_successful_code

T = TypeVar("T", covariant=True)


class Decodable(Protocol[T]):
    """Anything that can be built from a decoded JSON value, e.g. an ApiObject subclass."""

    def from_dict(self, data: Any) -> T: ...


def decode_error(body: bytes) -> ErrorDetails:
    """Decode an error payload; malformed or unexpected bodies give empty details."""
    try:
        payload = json.loads(body)
    except ValueError:
        return ErrorDetails()
    return ErrorDetails.from_payload(payload)


async def execute(
    session: ClientSession,
    request: OutboundRequest,
    result_type: Decodable[T] | None = None,
    timeout: float = REQUEST_TIMEOUT_SECONDS,
) -> tuple[bytes, T | None]:
    """
    Send a request and decode the response.

    Status codes in [200, 400) are successes. On failure the body is decoded
    as an API error payload and raised as RemoteError. On success the body is
    decoded into result_type when one is given; with result_type None the
    raw body is returned undecoded.

    Args:
        session (ClientSession): Aiohttp client session
        request (OutboundRequest): Request built by the marshaler
        result_type (Decodable[T] | None): Type with a from_dict() constructor
        timeout (float): Total timeout for the request in seconds

    Returns:
        Tuple of (body, result):
        - body (bytes): Raw response body
        - result (T | None): Decoded result, None when result_type is None

    Raises:
        RequestTimedOut: If the request exceeds the timeout
        TransportError: For any other connection-level failure
        RemoteError: For a non-success status code
        DecodingFailed: If a success body is not valid JSON for result_type
    """
    try:
        async with session.request(
            request.method,
            request.url,
            headers=request.headers,
            data=request.body,
            timeout=ClientTimeout(total=timeout),
        ) as response:
            status = response.status
            body = await response.read()
    except asyncio.TimeoutError as e:
        logger.debug(f"{request.method} {request.url} timed out after {timeout}s")
        raise RequestTimedOut() from e
    except (ClientError, OSError) as e:
        logger.debug(f"{request.method} {request.url} failed: {type(e).__name__}: {e}")
        raise TransportError(f"{type(e).__name__}: {e}") from e

    if not is_successful_code(status):
        details = decode_error(body)
        logger.warning(f"{request.method} {request.url} -> {status}: {details.message}")
        raise RemoteError(status, details, body)

    logger.debug(f"{request.method} {request.url} -> {status} ({len(body)} bytes)")

    if result_type is None:
        return body, None

    try:
        result = result_type.from_dict(json.loads(body))
    except (ValueError, TypeError) as e:
        raise DecodingFailed(f"Cannot decode response from {request.url}: {e}") from e
    return body, result
