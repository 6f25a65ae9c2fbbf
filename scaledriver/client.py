"""
Scale client.

This module provides the session that talks to a weighing scale: it owns
one connection and runs the single exchange the scale supports:

    DISCONNECTED -> open_connection() -> CONNECTED
    CONNECTED -> read_weight() -> CONNECTED
    CONNECTED -> close_connection() -> DISCONNECTED

There is no reconnect-on-failure and no retry. A failed read leaves the
connection as it was; callers decide whether to close, reopen or retry.

The client does no internal locking. Each read_weight() is one write
followed by one read, and concurrent callers must serialize access
themselves (one client per task, or an external asyncio.Lock).

Example:
    >>> from scaledriver import ScaleClient
    >>>
    >>> async def main():
    ...     async with ScaleClient.tcp("192.168.1.50:5001") as client:
    ...         reading = await client.read_weight()
    ...         print(reading.weight, reading.stable)
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from enum import Enum, auto
from typing import TYPE_CHECKING

from scaledriver.exceptions import ConnectionError
from scaledriver.protocol.constants import CommandCode, ProtocolConstants
from scaledriver.protocol.frames import build_command, parse_response
from scaledriver.transport.tcp import AsyncTcpTransport

if TYPE_CHECKING:
    from types import TracebackType

    from scaledriver.models.records import Reading
    from scaledriver.transport.abc import AbstractTransport

# Module logger
logger = logging.getLogger(__name__)


class ClientState(Enum):
    """Scale client connection states."""

    DISCONNECTED = auto()
    """No connection held."""

    CONNECTED = auto()
    """Connection open and ready for a request."""


class ScaleDriver(ABC):
    """
    Contract shared by all scale drivers.

    A driver opens a connection, reads weights over it and closes it.
    Implementations over other links only need to honour these three
    operations; the frame codec is shared.
    """

    @property
    @abstractmethod
    def is_connected(self) -> bool:
        """Check if the driver holds an open connection."""
        ...

    @abstractmethod
    async def open_connection(self) -> None:
        """
        Establish the connection to the scale.

        Raises:
            ConnectionError: If the connection cannot be established.
        """
        ...

    @abstractmethod
    async def read_weight(self) -> Reading:
        """
        Request and decode one weight reading.

        Raises:
            ConnectionError: If no connection is open.
            TransportError: If the exchange fails or times out.
            ProtocolError: If the reply cannot be decoded.
        """
        ...

    @abstractmethod
    async def close_connection(self) -> None:
        """Close the connection. Safe to call when not connected."""
        ...

    async def __aenter__(self) -> ScaleDriver:
        """Async context manager entry - opens the connection."""
        await self.open_connection()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Async context manager exit - closes the connection."""
        await self.close_connection()


class ScaleClient(ScaleDriver):
    """
    Client for reading weights from a scale.

    Runs the "get weight" exchange over any AbstractTransport. Use
    ScaleClient.tcp() for the common case of a scale on the network.

    Attributes:
        state: Current connection state.
        transport: The underlying transport layer.
        timeout: Per-operation timeout in seconds.

    Example:
        >>> client = ScaleClient.tcp("192.168.1.50:5001")
        >>> await client.open_connection()
        >>> try:
        ...     reading = await client.read_weight()
        ... finally:
        ...     await client.close_connection()
    """

    def __init__(
        self,
        transport: AbstractTransport,
        timeout: float = ProtocolConstants.DEFAULT_RECEIVE_TIMEOUT,
        connect_timeout: float = ProtocolConstants.DEFAULT_CONNECT_TIMEOUT,
    ) -> None:
        """
        Initialize the scale client.

        Args:
            transport: Transport layer for communication.
            timeout: Deadline for one read_weight() exchange in seconds,
                measured from the start of the call.
            connect_timeout: Connection establishment timeout in seconds.
        """
        self._transport = transport
        self._timeout = timeout
        self._connect_timeout = connect_timeout

    @classmethod
    def tcp(
        cls,
        address: str | tuple[str, int],
        timeout: float = ProtocolConstants.DEFAULT_RECEIVE_TIMEOUT,
        connect_timeout: float = ProtocolConstants.DEFAULT_CONNECT_TIMEOUT,
    ) -> ScaleClient:
        """
        Create a client for a scale at a TCP address.

        Args:
            address: "host:port" string or (host, port) tuple.
            timeout: Deadline for one read_weight() exchange in seconds.
            connect_timeout: Connection establishment timeout in seconds.

        Raises:
            ValueError: If the address is malformed.
        """
        transport = AsyncTcpTransport.from_address(address, default_timeout=timeout)
        return cls(transport, timeout=timeout, connect_timeout=connect_timeout)

    @property
    def state(self) -> ClientState:
        """Get the current connection state."""
        if self._transport.is_open:
            return ClientState.CONNECTED
        return ClientState.DISCONNECTED

    @property
    def is_connected(self) -> bool:
        """Check if client holds an open connection."""
        return self.state == ClientState.CONNECTED

    @property
    def transport(self) -> AbstractTransport:
        """Get the underlying transport."""
        return self._transport

    @property
    def timeout(self) -> float:
        return self._timeout

    async def open_connection(self) -> None:
        """
        Connect to the scale.

        If a connection is already open it is closed before the new one is
        established, so calling this twice never leaks a socket.

        Raises:
            ConnectionError: If the connection fails or times out.
        """
        if self._transport.is_open:
            logger.debug("Closing existing connection to %s before reopening", self._transport.address)
            await self._transport.close()

        logger.debug("Connecting to %s", self._transport.address)
        await self._transport.open(timeout=self._connect_timeout)

    async def read_weight(self) -> Reading:
        """
        Request one weight reading.

        Sends a GET_WEIGHT frame in a single write, then performs one read
        of at most 1024 bytes. Both share a deadline of `timeout` seconds
        from the start of the call.

        Returns:
            Decoded Reading.

        Raises:
            ConnectionError: If not connected.
            TimeoutError: If the exchange does not finish before the deadline.
            TransportError: If the write or read fails.
            ShortResponseError: If the reply is shorter than 13 bytes.
        """
        self._ensure_connected()

        loop = asyncio.get_running_loop()
        deadline = loop.time() + self._timeout

        frame = build_command(CommandCode.GET_WEIGHT)
        await self._transport.write(frame, timeout=self._remaining(deadline))

        reply = await self._transport.read(
            ProtocolConstants.READ_BUFFER_SIZE,
            timeout=self._remaining(deadline),
        )

        reading = parse_response(reply)
        logger.debug("Reading from %s: %s", self._transport.address, reading)
        return reading

    async def close_connection(self) -> None:
        """
        Close the connection.

        Safe to call even if never connected.
        """
        await self._transport.close()

    def _ensure_connected(self) -> None:
        """Verify client holds an open connection."""
        if not self._transport.is_open:
            raise ConnectionError(f"Not connected to {self._transport.address}")

    @staticmethod
    def _remaining(deadline: float) -> float:
        """Seconds left until deadline, never negative."""
        return max(0.0, deadline - asyncio.get_running_loop().time())

    async def __aenter__(self) -> ScaleClient:
        await self.open_connection()
        return self

    def __repr__(self) -> str:
        return f"ScaleClient(state={self.state.name}, address={self._transport.address})"
