"""
Scale protocol command codes and constants.

Frames sent to the scale start with a 3-byte header followed by the body
length as an unsigned 16-bit little-endian value. This client only ever
sends a one-byte body (the command code), so the preamble is fixed.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Final


class CommandCode(IntEnum):
    """
    Command codes understood by the scale.

    Only the weight request is used by this client.
    """

    GET_WEIGHT = 0x23
    """Request the current weight, division, status flags and tare."""


class ProtocolConstants:
    """
    Scale protocol constants.

    Contains the frame preamble, CRC parameters, response layout, buffer
    sizes and timing values used throughout the implementation.
    """

    # ===== Outbound Frame =====

    HEADER: Final[bytes] = bytes([0xF8, 0x55, 0xCE])
    """Fixed frame header."""

    BODY_LENGTH: Final[bytes] = bytes([0x01, 0x00])
    """Body length (1, uint16 little-endian): a single command byte."""

    PREAMBLE: Final[bytes] = HEADER + BODY_LENGTH
    """Everything that precedes the command byte."""

    CRC_SIZE: Final[int] = 2
    """Size of the trailing CRC field in bytes."""

    COMMAND_FRAME_SIZE: Final[int] = 8
    """Total size of a command frame: preamble + command + CRC."""

    # ===== CRC-16/CCITT =====

    CRC_POLYNOMIAL: Final[int] = 0x1021
    """CRC-16/CCITT generator polynomial."""

    CRC_INITIAL: Final[int] = 0xFFFF
    """Initial CRC register value."""

    # ===== Response Layout =====

    WEIGHT_OFFSET: Final[int] = 1
    """Offset of the signed 32-bit weight. Byte 0 is a status marker."""

    DIVISION_OFFSET: Final[int] = 5
    STABLE_OFFSET: Final[int] = 6
    NET_OFFSET: Final[int] = 7
    ZERO_OFFSET: Final[int] = 8

    TARE_OFFSET: Final[int] = 9
    """Offset of the signed 32-bit tare in extended replies."""

    FLAG_SET: Final[int] = 1
    """Flag byte value meaning 'true'. Any other value is false."""

    MIN_RESPONSE_LENGTH: Final[int] = 13
    """Shortest reply that carries weight, division and the three flags."""

    EXTENDED_RESPONSE_LENGTH: Final[int] = 17
    """Shortest reply that is treated as carrying a tare value."""

    # ===== Buffer Sizes =====

    READ_BUFFER_SIZE: Final[int] = 1024
    """Maximum bytes taken from the connection for a single reply."""

    # ===== Timing Constants (seconds) =====

    DEFAULT_CONNECT_TIMEOUT: Final[float] = 5.0
    """Connection establishment timeout."""

    DEFAULT_RECEIVE_TIMEOUT: Final[float] = 5.0
    """Reply timeout, measured from the start of the request."""

    DEFAULT_SEND_TIMEOUT: Final[float] = 5.0
    """Write (drain) timeout."""

    # ===== Serial Defaults =====

    DEFAULT_BAUD_RATE: Final[int] = 9600
    """Default baud rate for serial-attached scales."""
