from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Mapping, Sequence

from aiohttp import MultipartWriter
from loguru import logger
from multidict import CIMultiDict

from parallai.api.base import FieldKind, Requester
from parallai.errors import MultipartEncodingFailed, SerializationFailed

"""
Request marshaling.

Turns request objects into OutboundRequest instances in one of two
encodings: a JSON body, or a multipart/form-data body with file parts.
Both encodings carry the same authorization, organization and static
headers.
"""

JSON_CONTENT_TYPE = "application/json"
ORGANIZATION_HEADER = "OpenAI-Organization"


@dataclass
class Credentials:
    """
    Everything needed to authenticate a request.

    Attributes:
        api_key (str): Secret key sent as a bearer token
        org_id (str): Organization identifier; the header is only sent when non-empty
        http_headers (Mapping[str, str | Sequence[str]]): Extra static headers
    """

    api_key: str
    org_id: str = ""
    http_headers: Mapping[str, str | Sequence[str]] | None = None

    def build_headers(self, content_type: str) -> CIMultiDict[str]:
        """
        Build the header set for one request.

        Static headers are added on top of the auth headers, never replacing
        them, and every value configured for a name is sent.

        Args:
            content_type (str): Value of the Content-Type header

        Returns:
            CIMultiDict[str]: Case-insensitive multi-valued headers
        """
        headers: CIMultiDict[str] = CIMultiDict()
        headers["Content-Type"] = content_type
        headers["Authorization"] = f"Bearer {self.api_key}"
        if self.org_id:
            headers[ORGANIZATION_HEADER] = self.org_id

        for name, values in (self.http_headers or {}).items():
            if isinstance(values, str):
                values = [values]
            for value in values:
                headers.add(name, value)
        return headers


@dataclass(frozen=True)
class FormPart:
    """
    One encoded section of a multipart body.

    Attributes:
        name (str): Form field name
        value (str | bytes): Text for plain fields, raw contents for file parts
        filename (str | None): Attachment filename; set only for file parts
    """

    name: str
    value: str | bytes
    filename: str | None = None

    @property
    def is_file(self) -> bool:
        return self.filename is not None


@dataclass
class OutboundRequest:
    """
    A fully built HTTP request, ready for the transport.

    Attributes:
        method (str): HTTP method
        url (str): Absolute endpoint URL
        headers (CIMultiDict[str]): Request headers
        body (bytes | MultipartWriter | None): Encoded body, if any
        parts (tuple[FormPart, ...]): Multipart sections in body order (empty for JSON)
    """

    method: str
    url: str
    headers: CIMultiDict[str]
    body: bytes | MultipartWriter | None = None
    parts: tuple[FormPart, ...] = ()

    @property
    def content_type(self) -> str:
        return self.headers.get("Content-Type", "")


def build_json_request(
    credentials: Credentials,
    method: str,
    url: str,
    body: Requester | Mapping[str, Any] | None = None,
) -> OutboundRequest:
    """
    Build a request with an optional JSON body.

    Args:
        credentials (Credentials): Auth and static headers
        method (str): HTTP method
        url (str): Endpoint URL
        body (Requester | Mapping[str, Any] | None): Request object or plain mapping

    Returns:
        OutboundRequest: The request, with body None when no body object was given

    Raises:
        SerializationFailed: If the body cannot be encoded as JSON
    """
    data: bytes | None = None
    if body is not None:
        payload = body.to_dict() if isinstance(body, Requester) else body
        try:
            data = json.dumps(payload).encode("utf-8")
        except (TypeError, ValueError) as e:
            raise SerializationFailed(f"Cannot serialize {type(body).__name__}: {e}") from e

    return OutboundRequest(
        method=method,
        url=url,
        headers=credentials.build_headers(JSON_CONTENT_TYPE),
        body=data,
    )


def encode_form_parts(body: Requester) -> tuple[FormPart, ...]:
    """
    Encode the declared form fields of a request.

    Files are read in full; None values (including unset optional files) are
    skipped; strings are written verbatim and every other value is
    JSON-encoded, so True becomes "true" and a list becomes "[...]".

    Raises:
        MultipartEncodingFailed: If a file cannot be read or a value cannot be encoded
    """
    parts: list[FormPart] = []
    for form_field, value in body.form_values():
        if value is None:
            continue
        try:
            if form_field.kind is FieldKind.FILE:
                parts.append(FormPart(form_field.name, value.read(), filename=value.filename))
            elif isinstance(value, str):
                parts.append(FormPart(form_field.name, value))
            else:
                parts.append(FormPart(form_field.name, json.dumps(value)))
        except (OSError, ValueError, TypeError) as e:
            raise MultipartEncodingFailed(
                f"Cannot encode form field {form_field.name!r}: {e}"
            ) from e
    return tuple(parts)


def build_multipart_request(
    credentials: Credentials,
    method: str,
    url: str,
    body: Requester,
) -> OutboundRequest:
    """
    Build a multipart/form-data request from a request's FORM_FIELDS.

    The boundary is random per request, so the Content-Type header is taken
    from the encoder rather than fixed.

    Raises:
        MultipartEncodingFailed: If any part cannot be read or written
    """
    parts = encode_form_parts(body)

    writer = MultipartWriter("form-data")
    try:
        for part in parts:
            payload = writer.append(part.value)
            if part.is_file:
                payload.set_content_disposition(
                    "form-data", name=part.name, filename=part.filename
                )
            else:
                payload.set_content_disposition("form-data", name=part.name)
    except (TypeError, ValueError) as e:
        raise MultipartEncodingFailed(f"Cannot build multipart body: {e}") from e

    logger.debug(f"Encoded {len(parts)} form parts for {method} {url}")

    return OutboundRequest(
        method=method,
        url=url,
        headers=credentials.build_headers(writer.content_type),
        body=writer,
        parts=parts,
    )
