"""
Protocol layer for scale communication.

This module contains the low-level protocol handling:
- Command codes and protocol constants
- CRC-16/CCITT calculation and validation
- Command frame building and reply parsing
"""

from scaledriver.protocol.checksums import (
    append_crc,
    calculate_crc16_ccitt,
    encode_crc,
    validate_crc,
)
from scaledriver.protocol.constants import CommandCode, ProtocolConstants
from scaledriver.protocol.frames import build_command, parse_response

__all__ = [
    # Constants
    "CommandCode",
    "ProtocolConstants",
    # Checksums
    "calculate_crc16_ccitt",
    "encode_crc",
    "append_crc",
    "validate_crc",
    # Frames
    "build_command",
    "parse_response",
]
