"""
Async TCP transport using asyncio streams.

This is the primary transport: the scale listens on a plain TCP port
(no TLS, no authentication) and answers one request per write.

Example:
    >>> transport = AsyncTcpTransport("192.168.1.50", 5001)
    >>> async with transport:
    ...     await transport.write(frame)
    ...     reply = await transport.read(1024, timeout=5.0)
"""

from __future__ import annotations

import asyncio
import logging

from scaledriver.exceptions import ConnectionError, TimeoutError, TransportError
from scaledriver.protocol.constants import ProtocolConstants
from scaledriver.transport.abc import AbstractTransport

logger = logging.getLogger(__name__)


def parse_address(address: str | tuple[str, int]) -> tuple[str, int]:
    """
    Split a "host:port" address into its parts.

    IPv6 hosts must be bracketed ("[::1]:5001"). A (host, port) tuple is
    validated and passed through.

    Args:
        address: "host:port" string or (host, port) tuple.

    Returns:
        (host, port) tuple.

    Raises:
        ValueError: If the address is malformed or the port is out of range.

    Example:
        >>> parse_address("192.168.1.50:5001")
        ('192.168.1.50', 5001)
        >>> parse_address("[::1]:5001")
        ('::1', 5001)
    """
    if isinstance(address, tuple):
        host, port = address
        if not isinstance(port, int) or isinstance(port, bool):
            raise ValueError(f"Port must be an integer, got {port!r}")
    else:
        host, sep, port_text = address.rpartition(":")
        if not sep or not port_text.isdigit():
            raise ValueError(f"Address must be 'host:port', got {address!r}")
        if host.startswith("[") and host.endswith("]"):
            host = host[1:-1]
        elif ":" in host:
            raise ValueError(f"IPv6 host must be bracketed, got {address!r}")
        port = int(port_text)

    if not host:
        raise ValueError(f"Address has no host: {address!r}")
    if not 0 < port <= 0xFFFF:
        raise ValueError(f"Port must be 1-65535, got {port}")
    return host, port


class AsyncTcpTransport(AbstractTransport):
    """
    Async TCP transport.

    Holds at most one socket. Opening while connected closes the old
    socket first, so repeated open() calls never leak descriptors.

    Attributes:
        host: Scale hostname or IP address.
        port: Scale TCP port.
        is_open: Whether a socket is currently connected.

    Example:
        >>> transport = AsyncTcpTransport("192.168.1.50", 5001)
        >>> await transport.open()
        >>> try:
        ...     await transport.write(build_command(CommandCode.GET_WEIGHT))
        ...     reply = await transport.read(1024)
        ... finally:
        ...     await transport.close()
    """

    def __init__(
        self,
        host: str,
        port: int,
        default_timeout: float = ProtocolConstants.DEFAULT_RECEIVE_TIMEOUT,
    ) -> None:
        """
        Initialize the TCP transport.

        Args:
            host: Scale hostname or IP address.
            port: Scale TCP port.
            default_timeout: Default connect/read/write timeout in seconds.
        """
        self._host, self._port = parse_address((host, port))
        self._default_timeout = default_timeout
        self._reader: asyncio.StreamReader | None = None
        self._writer: asyncio.StreamWriter | None = None

    @classmethod
    def from_address(
        cls,
        address: str | tuple[str, int],
        default_timeout: float = ProtocolConstants.DEFAULT_RECEIVE_TIMEOUT,
    ) -> AsyncTcpTransport:
        """Create a transport from a "host:port" string or (host, port) tuple."""
        host, port = parse_address(address)
        return cls(host, port, default_timeout=default_timeout)

    @property
    def is_open(self) -> bool:
        """Check if the socket is currently connected."""
        return (
            self._writer is not None
            and not self._writer.is_closing()
            and self._reader is not None
        )

    @property
    def address(self) -> str:
        """Get the "host:port" address."""
        if ":" in self._host:
            return f"[{self._host}]:{self._port}"
        return f"{self._host}:{self._port}"

    @property
    def host(self) -> str:
        return self._host

    @property
    def port(self) -> int:
        return self._port

    async def open(self, timeout: float | None = None) -> None:
        """
        Connect to the scale.

        Args:
            timeout: Connect timeout in seconds. None uses default timeout.

        Raises:
            ConnectionError: If the connection fails or times out.
        """
        if self._writer is not None:
            logger.debug("Replacing existing connection to %s", self.address)
            await self.close()

        effective_timeout = timeout if timeout is not None else self._default_timeout

        try:
            self._reader, self._writer = await asyncio.wait_for(
                asyncio.open_connection(self._host, self._port),
                timeout=effective_timeout,
            )
        except asyncio.TimeoutError:
            raise ConnectionError(
                f"Timed out connecting to {self.address} after {effective_timeout:.1f}s"
            ) from None
        except OSError as e:
            raise ConnectionError(f"Failed to connect to {self.address}: {e}") from e

        logger.info("Connected to %s", self.address)

    async def close(self) -> None:
        """
        Close the socket.

        Safe to call multiple times.
        """
        writer = self._writer
        self._reader = None
        self._writer = None

        if writer is None:
            return

        writer.close()
        try:
            await writer.wait_closed()
        except OSError as e:
            # Peer already reset the connection; the socket is closed either way
            logger.debug("Error while closing %s: %s", self.address, e)

        logger.info("Disconnected from %s", self.address)

    async def write(self, data: bytes, timeout: float | None = None) -> None:
        """
        Write a frame to the socket in a single write call.

        Args:
            data: Bytes to transmit.
            timeout: Drain timeout in seconds. None uses default timeout.

        Raises:
            TimeoutError: If the write does not drain in time.
            TransportError: If the socket is not open or write fails.
        """
        if not self.is_open:
            raise TransportError(f"Connection to {self.address} is not open")

        effective_timeout = timeout if timeout is not None else self._default_timeout

        try:
            self._writer.write(data)
            await asyncio.wait_for(self._writer.drain(), timeout=effective_timeout)
        except asyncio.TimeoutError:
            raise TimeoutError(
                f"Timeout writing to {self.address}",
                timeout_seconds=effective_timeout,
            ) from None
        except OSError as e:
            raise TransportError(f"Write to {self.address} failed: {e}") from e

        logger.debug("Sent %d bytes to %s: %s", len(data), self.address, data.hex(" "))

    async def read(self, max_bytes: int, timeout: float | None = None) -> bytes:
        """
        Read one chunk of up to max_bytes from the socket.

        Args:
            max_bytes: Upper bound on the number of bytes returned.
            timeout: Read timeout in seconds. None uses default timeout.

        Returns:
            Between 1 and max_bytes bytes.

        Raises:
            TimeoutError: If nothing arrives before the timeout.
            TransportError: If the socket is not open, was closed by the
                peer, or the read fails.
        """
        if not self.is_open:
            raise TransportError(f"Connection to {self.address} is not open")

        effective_timeout = timeout if timeout is not None else self._default_timeout

        try:
            data = await asyncio.wait_for(
                self._reader.read(max_bytes),
                timeout=effective_timeout,
            )
        except asyncio.TimeoutError:
            raise TimeoutError(
                f"Timeout waiting for reply from {self.address}",
                timeout_seconds=effective_timeout,
            ) from None
        except OSError as e:
            raise TransportError(f"Read from {self.address} failed: {e}") from e

        if not data:
            raise TransportError(f"Connection closed by {self.address}")

        logger.debug("Received %d bytes from %s: %s", len(data), self.address, data.hex(" "))
        return data

    def __repr__(self) -> str:
        status = "open" if self.is_open else "closed"
        return f"AsyncTcpTransport({self.address!r}, {status})"
