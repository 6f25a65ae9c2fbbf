"""Tests for ScaleClient."""

import struct

import pytest

from scaledriver import ClientState, ScaleClient, ScaleDriver
from scaledriver.exceptions import (
    ConnectionError,
    ShortResponseError,
    TimeoutError,
    TransportError,
)
from scaledriver.protocol.frames import build_command
from scaledriver.transport.mock import MockTransport
from scaledriver.transport.tcp import AsyncTcpTransport

GET_WEIGHT_FRAME = bytes([0xF8, 0x55, 0xCE, 0x01, 0x00, 0x23, 0xF1, 0xF5])


def make_reply(weight: int, tare: int | None = None) -> bytes:
    """Build a 13-byte reply, or a 17-byte one when tare is given."""
    reply = b"\x24" + struct.pack("<i", weight) + bytes([3, 1, 1, 0])
    if tare is None:
        return reply + b"\x00" * 4
    return reply + struct.pack("<i", tare) + b"\x00" * 4


class TestScaleClient:
    """Tests for ScaleClient class."""

    @pytest.fixture
    def mock_transport(self):
        """Create a MockTransport instance."""
        return MockTransport()

    @pytest.fixture
    def client(self, mock_transport):
        """Create a ScaleClient with mock transport."""
        return ScaleClient(mock_transport, timeout=1.0)

    def test_initial_state(self, client):
        """Test client starts in disconnected state."""
        assert client.state == ClientState.DISCONNECTED
        assert client.is_connected is False

    def test_is_a_scale_driver(self, client):
        assert isinstance(client, ScaleDriver)

    @pytest.mark.asyncio
    async def test_close_without_open(self, client, mock_transport):
        """Test that closing a never-opened client succeeds."""
        await client.close_connection()
        await client.close_connection()
        assert client.state == ClientState.DISCONNECTED
        assert mock_transport.close_count == 0

    @pytest.mark.asyncio
    async def test_open_connection(self, client):
        await client.open_connection()
        assert client.state == ClientState.CONNECTED
        assert client.is_connected is True

    @pytest.mark.asyncio
    async def test_open_twice_closes_previous(self, client, mock_transport):
        """Test that reopening closes the held connection first."""
        await client.open_connection()
        await client.open_connection()
        assert mock_transport.open_count == 2
        assert mock_transport.close_count == 1
        assert client.is_connected is True

    @pytest.mark.asyncio
    async def test_open_failure_raises_connection_error(self, client, mock_transport):
        mock_transport.fail_open(OSError("connection refused"))
        with pytest.raises(ConnectionError):
            await client.open_connection()
        assert client.state == ClientState.DISCONNECTED

    @pytest.mark.asyncio
    async def test_read_weight(self, client, mock_transport):
        """Test a full get-weight exchange."""
        mock_transport.add_response(make_reply(12345))
        await client.open_connection()

        reading = await client.read_weight()

        assert reading.weight == 12345
        assert reading.division == 3
        assert reading.stable is True
        assert reading.net is True
        assert reading.zero is False
        assert reading.has_tare is False
        mock_transport.assert_write_count(1)
        mock_transport.assert_written(GET_WEIGHT_FRAME)

    @pytest.mark.asyncio
    async def test_read_weight_with_tare(self, client, mock_transport):
        mock_transport.add_response(make_reply(-250, tare=-500))
        await client.open_connection()

        reading = await client.read_weight()

        assert reading.weight == -250
        assert reading.tare == -500

    @pytest.mark.asyncio
    async def test_read_weight_uses_deadline(self, client, mock_transport):
        """Test that the read timeout never exceeds the client timeout."""
        mock_transport.add_response(make_reply(1))
        await client.open_connection()
        await client.read_weight()
        assert 0 <= mock_transport.last_timeout <= 1.0

    @pytest.mark.asyncio
    async def test_read_weight_not_connected(self, client, mock_transport):
        """Test that reading without a connection raises."""
        with pytest.raises(ConnectionError):
            await client.read_weight()
        assert mock_transport.written_data == []

    @pytest.mark.asyncio
    async def test_read_weight_no_reply(self, client):
        """Test that a missing reply surfaces as a timeout."""
        await client.open_connection()
        with pytest.raises(TimeoutError):
            await client.read_weight()

    @pytest.mark.asyncio
    async def test_timeout_is_transport_error(self, client):
        await client.open_connection()
        with pytest.raises(TransportError):
            await client.read_weight()

    @pytest.mark.asyncio
    async def test_write_failure(self, client, mock_transport):
        await client.open_connection()
        mock_transport.fail_write(BrokenPipeError("broken pipe"))
        with pytest.raises(TransportError):
            await client.read_weight()

    @pytest.mark.asyncio
    async def test_read_failure(self, client, mock_transport):
        """Test that a failed read surfaces as a transport error."""
        mock_transport.add_response(make_reply(1))
        mock_transport.fail_read(ConnectionResetError("connection reset by peer"))
        await client.open_connection()

        with pytest.raises(TransportError) as exc_info:
            await client.read_weight()

        assert not isinstance(exc_info.value, TimeoutError)
        mock_transport.assert_write_count(1)

    @pytest.mark.asyncio
    async def test_short_reply(self, client, mock_transport):
        """Test that a short reply is a protocol error, not a transport error."""
        mock_transport.add_response(make_reply(1)[:12])
        await client.open_connection()

        with pytest.raises(ShortResponseError) as exc_info:
            await client.read_weight()
        assert not isinstance(exc_info.value, TransportError)

    @pytest.mark.asyncio
    async def test_no_retry_after_failure(self, client, mock_transport):
        """Test that a failed exchange is not retried."""
        await client.open_connection()
        with pytest.raises(TimeoutError):
            await client.read_weight()
        mock_transport.assert_write_count(1)

    @pytest.mark.asyncio
    async def test_connection_kept_after_failure(self, client, mock_transport):
        """Test that errors do not close the connection implicitly."""
        mock_transport.add_responses(b"\x00", make_reply(42))
        await client.open_connection()

        with pytest.raises(ShortResponseError):
            await client.read_weight()
        assert client.is_connected is True

        reading = await client.read_weight()
        assert reading.weight == 42

    @pytest.mark.asyncio
    async def test_context_manager_closes_on_error(self, mock_transport):
        """Test that the connection is closed when the body raises."""
        with pytest.raises(TimeoutError):
            async with ScaleClient(mock_transport) as client:
                assert client.is_connected
                await client.read_weight()

        assert mock_transport.is_open is False
        assert mock_transport.close_count == 1

    @pytest.mark.asyncio
    async def test_response_callback_exchange(self, mock_transport):
        """Test replies generated per request."""
        mock_transport.set_response_callback(
            lambda frame: make_reply(7) if frame == build_command(0x23) else None
        )
        async with ScaleClient(mock_transport) as client:
            first = await client.read_weight()
            second = await client.read_weight()
        assert first.weight == second.weight == 7

    def test_tcp_factory(self):
        client = ScaleClient.tcp("192.168.1.50:5001", timeout=2.0)
        assert isinstance(client.transport, AsyncTcpTransport)
        assert client.transport.address == "192.168.1.50:5001"
        assert client.timeout == 2.0

    def test_tcp_factory_bad_address(self):
        with pytest.raises(ValueError):
            ScaleClient.tcp("no-port-here")

    def test_repr(self, client):
        assert repr(client) == "ScaleClient(state=DISCONNECTED, address=mock://scale)"
