"""Tests for command frame building and reply parsing."""

import struct

import pytest

from scaledriver.exceptions import ProtocolError, ShortResponseError
from scaledriver.protocol.checksums import calculate_crc16_ccitt, validate_crc
from scaledriver.protocol.constants import CommandCode, ProtocolConstants
from scaledriver.protocol.frames import build_command, parse_response


def make_reply(
    weight: int = 12345,
    division: int = 2,
    stable: int = 1,
    net: int = 0,
    zero: int = 1,
    tare: int | None = None,
    marker: int = 0xAA,
) -> bytes:
    """Build a reply the way the scale lays it out.

    Without a tare the reply is 13 bytes, bytes [9..13) being padding.
    With a tare it is 17 bytes: tare at [9..13) plus 4 trailing bytes.
    """
    reply = bytes([marker]) + struct.pack("<i", weight) + bytes([division, stable, net, zero])
    if tare is None:
        return reply + b"\x00" * 4
    return reply + struct.pack("<i", tare) + b"\x00" * 4


class TestBuildCommand:
    """Tests for build_command."""

    def test_get_weight_frame(self):
        """Test the exact bytes of the get-weight frame."""
        frame = build_command(CommandCode.GET_WEIGHT)
        assert frame == bytes([0xF8, 0x55, 0xCE, 0x01, 0x00, 0x23, 0xF1, 0xF5])

    def test_frame_layout(self):
        """Test preamble, command and little-endian CRC positions."""
        frame = build_command(0x23)
        crc = calculate_crc16_ccitt(bytes([0x23]))
        assert len(frame) == ProtocolConstants.COMMAND_FRAME_SIZE
        assert frame[:5] == ProtocolConstants.PREAMBLE
        assert frame[5] == 0x23
        assert frame[6] == crc & 0xFF
        assert frame[7] == crc >> 8

    def test_crc_covers_command_only(self):
        """Test that the preamble is excluded from the CRC."""
        frame = build_command(0x23)
        assert validate_crc(frame) is True
        assert calculate_crc16_ccitt(frame[:6]) != calculate_crc16_ccitt(frame[5:6])

    @pytest.mark.parametrize("code", [0x00, 0x01, 0x7F, 0x80, 0xFF])
    def test_any_byte_accepted(self, code):
        """Test that any byte value builds a valid 8-byte frame."""
        frame = build_command(code)
        assert len(frame) == 8
        assert frame[5] == code
        assert validate_crc(frame) is True

    @pytest.mark.parametrize("code", [-1, 256, 0x1000])
    def test_out_of_range_raises(self, code):
        with pytest.raises(ValueError):
            build_command(code)

    def test_returns_fresh_bytes(self):
        """Test that each call returns an immutable bytes object."""
        assert isinstance(build_command(0x23), bytes)
        assert build_command(0x23) == build_command(0x23)


class TestParseResponse:
    """Tests for parse_response."""

    def test_minimal_reply(self):
        """Test a 13-byte reply with no tare."""
        reading = parse_response(make_reply())

        assert reading.weight == 12345
        assert reading.division == 2
        assert reading.stable is True
        assert reading.net is False
        assert reading.zero is True
        assert reading.tare is None
        assert reading.has_tare is False

    def test_extended_reply_with_negative_tare(self):
        """Test a 17-byte reply carrying tare=-500."""
        reading = parse_response(make_reply(tare=-500))

        assert reading.weight == 12345
        assert reading.tare == -500
        assert reading.has_tare is True

    def test_tare_of_zero_is_present(self):
        """Test that an explicit zero tare is distinguishable from no tare."""
        reading = parse_response(make_reply(tare=0))
        assert reading.tare == 0
        assert reading.has_tare is True

    @pytest.mark.parametrize("weight", [-1, -12345, -(2**31), 2**31 - 1, 0])
    def test_signed_weight(self, weight):
        """Test two's-complement decoding of the weight."""
        assert parse_response(make_reply(weight=weight)).weight == weight

    @pytest.mark.parametrize("length", range(13))
    def test_short_reply_raises(self, length):
        """Test that replies under 13 bytes are rejected."""
        with pytest.raises(ShortResponseError) as exc_info:
            parse_response(make_reply(tare=-500)[:length])

        assert exc_info.value.expected == 13
        assert exc_info.value.received == length

    def test_short_reply_is_protocol_error(self):
        with pytest.raises(ProtocolError):
            parse_response(b"\x00" * 12)

    @pytest.mark.parametrize("length", [13, 14, 15, 16])
    def test_partial_tare_field_is_absent(self, length):
        """Test that 13-16 byte replies parse without tare even when [9..13) is non-zero."""
        reply = make_reply(tare=-500)[:length]
        assert len(reply) == length
        reading = parse_response(reply)
        assert reading.weight == 12345
        assert reading.tare is None
        assert reading.has_tare is False

    def test_reply_lengths(self):
        """Test that the fixtures match the minimal and extended reply sizes."""
        assert len(make_reply()) == 13
        assert len(make_reply(tare=0)) == 17

    def test_trailing_bytes_ignored(self):
        """Test that bytes after the tare field are not interpreted."""
        reply = make_reply(tare=250) + b"\xde\xad\xbe\xef" * 10
        reading = parse_response(reply)
        assert reading.weight == 12345
        assert reading.tare == 250

    def test_status_marker_ignored(self):
        """Test that byte 0 does not influence the reading."""
        a = parse_response(make_reply(marker=0x00))
        b = parse_response(make_reply(marker=0xFF))
        assert (a.weight, a.division, a.stable, a.net, a.zero) == (
            b.weight,
            b.division,
            b.stable,
            b.net,
            b.zero,
        )

    @pytest.mark.parametrize("flag_byte", [0, 2, 0x80, 0xFF])
    def test_flags_true_only_for_one(self, flag_byte):
        """Test that only a byte value of 1 reads as true."""
        reading = parse_response(make_reply(stable=flag_byte, net=flag_byte, zero=flag_byte))
        assert reading.stable is False
        assert reading.net is False
        assert reading.zero is False

    def test_division_full_byte(self):
        assert parse_response(make_reply(division=0xFF)).division == 255

    def test_accepts_bytearray(self):
        reading = parse_response(bytearray(make_reply()))
        assert reading.weight == 12345

    def test_raw_kept(self):
        """Test that the reading keeps the reply bytes."""
        reply = make_reply(tare=1)
        assert parse_response(reply).raw == reply
