"""
Scale protocol frame building and parsing.

Outbound command frame (8 bytes):

    [F8 55 CE][01 00][CMD][CRC_LO CRC_HI]

    - Header F8 55 CE, then body length 1 as uint16 little-endian
    - CMD is the single command byte
    - CRC-16/CCITT of CMD only, low byte first

Inbound weight reply (13 bytes minimum, integers little-endian):

    Offset  Size  Content
    0       1     status marker (not decoded)
    1       4     weight, signed
    5       1     division
    6       1     stable flag (1 = true)
    7       1     net flag (1 = true)
    8       1     zero flag (1 = true)
    9       4     tare, signed (only when the reply is 17 bytes or longer)

Replies are trusted as received: there is no upper length bound and no CRC
check, and bytes past the decoded fields are ignored.
"""

from __future__ import annotations

import logging
import struct
from typing import Final

from scaledriver.exceptions import ShortResponseError
from scaledriver.models.records import Reading
from scaledriver.protocol.checksums import append_crc
from scaledriver.protocol.constants import ProtocolConstants

logger = logging.getLogger(__name__)

_INT32_LE: Final[struct.Struct] = struct.Struct("<i")


def build_command(code: int) -> bytes:
    """
    Build an outbound command frame.

    Args:
        code: Command byte (0-255). Usually CommandCode.GET_WEIGHT.

    Returns:
        Complete 8-byte frame: preamble + command + CRC.

    Raises:
        ValueError: If code does not fit in a byte.

    Example:
        >>> build_command(0x23).hex(" ")
        'f8 55 ce 01 00 23 f1 f5'
    """
    if not 0 <= code <= 0xFF:
        raise ValueError(f"Command code must be 0-255, got {code}")
    return ProtocolConstants.PREAMBLE + append_crc(bytes([code]))


def parse_response(raw: bytes | bytearray | memoryview) -> Reading:
    """
    Decode a weight reply into a Reading.

    Args:
        raw: Reply bytes exactly as read from the connection.

    Returns:
        Decoded Reading. tare is None unless the reply is long enough
        to carry the extended field.

    Raises:
        ShortResponseError: If fewer than 13 bytes were supplied.
    """
    data = bytes(raw)
    if len(data) < ProtocolConstants.MIN_RESPONSE_LENGTH:
        logger.warning("Short response (%d bytes): %s", len(data), data.hex(" "))
        raise ShortResponseError(
            "Weight response too short",
            expected=ProtocolConstants.MIN_RESPONSE_LENGTH,
            received=len(data),
        )

    (weight,) = _INT32_LE.unpack_from(data, ProtocolConstants.WEIGHT_OFFSET)

    tare: int | None = None
    if len(data) >= ProtocolConstants.EXTENDED_RESPONSE_LENGTH:
        (tare,) = _INT32_LE.unpack_from(data, ProtocolConstants.TARE_OFFSET)

    return Reading(
        weight=weight,
        division=data[ProtocolConstants.DIVISION_OFFSET],
        stable=data[ProtocolConstants.STABLE_OFFSET] == ProtocolConstants.FLAG_SET,
        net=data[ProtocolConstants.NET_OFFSET] == ProtocolConstants.FLAG_SET,
        zero=data[ProtocolConstants.ZERO_OFFSET] == ProtocolConstants.FLAG_SET,
        tare=tare,
        raw=data,
    )
