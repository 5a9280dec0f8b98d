"""Core building blocks: request marshaling, transport, fan-out and artifact saving."""

from parallai.core.artifacts import save_images, to_image_path
from parallai.core.fanout import fan_out, fan_out_settled, run_bounded
from parallai.core.marshal import (
    Credentials,
    FormPart,
    OutboundRequest,
    build_json_request,
    build_multipart_request,
    encode_form_parts,
)
from parallai.core.models import ClientConfig, Outcome
from parallai.core.transport import decode_error, execute

__all__ = [
    # Marshaling
    "Credentials",
    "FormPart",
    "OutboundRequest",
    "build_json_request",
    "build_multipart_request",
    "encode_form_parts",
    # Transport
    "execute",
    "decode_error",
    # Fan-out
    "fan_out",
    "fan_out_settled",
    "run_bounded",
    # Artifacts
    "save_images",
    "to_image_path",
    # Models
    "ClientConfig",
    "Outcome",
]
