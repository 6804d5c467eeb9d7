"""
Zabbix sender wire codec.

Frame layout (request and response)::

    offset 0..4   "ZBXD"
    offset 4      protocol version, 0x01
    offset 5..13  payload length, little-endian
    offset 13..   JSON payload

The length field is 8 bytes wide but only the low 32 bits are ever written;
the high 4 bytes stay zero. Collectors rely on that layout, keep it.
"""
import logging
import struct

from pydantic import ValidationError

from zabbix_sender.exceptions import ProtocolError
from zabbix_sender.models import Packet, Response

logger = logging.getLogger(__name__)

MAGIC = b"ZBXD"
VERSION = 1
HEADER = MAGIC + bytes([VERSION])  # 5 bytes
LENGTH_SIZE = 8
FRAME_HEADER_SIZE = len(HEADER) + LENGTH_SIZE  # 13 bytes

MAX_PAYLOAD = 0xFFFFFFFF


def data_len(payload: bytes) -> bytes:
    """Return the 8-byte length field: uint32 little-endian + 4 zero bytes."""
    if len(payload) > MAX_PAYLOAD:
        raise ProtocolError("Payload too large for the length field", detail=f"{len(payload)} bytes")
    return struct.pack("<I", len(payload)) + b"\x00" * (LENGTH_SIZE - 4)


def encode_frame(packet: Packet) -> bytes:
    """Encode a packet into header + length + JSON payload."""
    payload = packet.to_json()
    return HEADER + data_len(payload) + payload


def decode_response(raw: bytes) -> Response:
    """Decode a full response frame.

    The length field is not checked; everything after the 13-byte header is
    the payload.

    Raises:
        ProtocolError: frame too short, wrong header, or payload is not a
            ``{"response": ..., "info": ...}`` object.
    """
    if len(raw) < FRAME_HEADER_SIZE:
        raise ProtocolError(
            f"Response too short: got {len(raw)} bytes, expected at least {FRAME_HEADER_SIZE}",
        )

    header = raw[:len(HEADER)]
    if header != HEADER:
        raise ProtocolError(f"Got no valid header {header!r}, expected {HEADER!r}")

    payload = raw[FRAME_HEADER_SIZE:]
    try:
        response = Response.model_validate_json(payload)
    except ValidationError as exc:
        logger.debug("Invalid response payload: %r", payload[:200])
        raise ProtocolError("Zabbix response is not valid", detail=str(exc)) from exc
    return response
