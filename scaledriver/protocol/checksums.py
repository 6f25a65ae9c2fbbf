"""
CRC-16/CCITT calculation and validation.

Command frames end with a CRC-16/CCITT of the command body:

- Polynomial 0x1021, register initialised to 0xFFFF
- Bits processed MSB-first, no input or output reflection
- No final XOR
- Emitted little-endian (low byte first)

Only the frame body (the bytes after the preamble) is covered. Replies from
the scale carry no CRC and are never validated.
"""

from __future__ import annotations

from scaledriver.protocol.constants import ProtocolConstants


def calculate_crc16_ccitt(data: bytes | bytearray | memoryview) -> int:
    """
    Calculate CRC-16/CCITT over the specified data.

    Bit-at-a-time implementation: each byte is XORed into the high byte of
    the register, then the register is shifted left eight times, XORing in
    the polynomial whenever a set bit falls off the top.

    Args:
        data: Data to checksum (the frame body, not the preamble).

    Returns:
        16-bit CRC value (0-0xFFFF).

    Example:
        >>> hex(calculate_crc16_ccitt(b"123456789"))
        '0x29b1'
        >>> hex(calculate_crc16_ccitt(b"\\x23"))
        '0xf5f1'
    """
    crc = ProtocolConstants.CRC_INITIAL
    for byte in data:
        crc ^= byte << 8
        for _ in range(8):
            if crc & 0x8000:
                crc = ((crc << 1) ^ ProtocolConstants.CRC_POLYNOMIAL) & 0xFFFF
            else:
                crc = (crc << 1) & 0xFFFF
    return crc


def encode_crc(crc: int) -> bytes:
    """
    Encode a CRC value as 2 bytes, low byte first.

    Args:
        crc: 16-bit CRC value (0-0xFFFF).

    Returns:
        2-byte little-endian representation.

    Raises:
        ValueError: If crc is not in range 0-0xFFFF.

    Example:
        >>> encode_crc(0xF5F1)
        b'\\xf1\\xf5'
    """
    if not 0 <= crc <= 0xFFFF:
        raise ValueError(f"CRC must be 0-0xFFFF, got {crc}")
    return bytes([crc & 0xFF, crc >> 8])


def append_crc(body: bytes | bytearray) -> bytes:
    """
    Calculate the CRC of a frame body and append it.

    Args:
        body: Frame body to checksum.

    Returns:
        Original body followed by the 2-byte little-endian CRC.
    """
    return bytes(body) + encode_crc(calculate_crc16_ccitt(body))


def validate_crc(
    frame: bytes | bytearray | memoryview,
    body_offset: int = len(ProtocolConstants.PREAMBLE),
) -> bool:
    """
    Validate the trailing CRC of a command frame.

    Args:
        frame: Complete frame including the 2 CRC bytes.
        body_offset: Offset of the first body byte (default: after preamble).

    Returns:
        True if the CRC matches the body, False otherwise.
    """
    crc_offset = len(frame) - ProtocolConstants.CRC_SIZE
    if crc_offset < body_offset:
        return False

    expected = calculate_crc16_ccitt(frame[body_offset:crc_offset])
    received = frame[crc_offset] | (frame[crc_offset + 1] << 8)
    return expected == received
