"""
Abstract transport interface for scale communication.

This module defines the abstract base class for all transport implementations.
Transports handle the low-level byte exchange with a scale over TCP, a
serial port or a test double.

The transport layer is responsible for:
- Opening/closing the physical connection
- Writing a frame and reading one reply chunk
- Timeout handling and error classification

Implementations:
- AsyncTcpTransport: asyncio stream socket
- AsyncSerialTransport: pyserial-asyncio serial port
- MockTransport: for testing without hardware
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from types import TracebackType


class AbstractTransport(ABC):
    """
    Abstract base class for scale transports.

    Transports provide async read/write operations on a single connection.
    They are not safe for concurrent use: one request at a time, with
    callers serializing access themselves.

    Transports support async context manager protocol for safe resource
    management:

        async with AsyncTcpTransport("192.168.1.50", 5001) as transport:
            await transport.write(frame)
            reply = await transport.read(1024)

    Attributes:
        is_open: Whether the transport connection is currently open.
        address: Identifier for the transport (e.g., "host:port").
    """

    @property
    @abstractmethod
    def is_open(self) -> bool:
        """
        Check if the transport connection is currently open.

        Returns:
            True if connected and ready for I/O, False otherwise.
        """
        ...

    @property
    @abstractmethod
    def address(self) -> str:
        """
        Get the transport identifier.

        Returns:
            Address string (e.g., "192.168.1.50:5001", "/dev/ttyUSB0").
        """
        ...

    @abstractmethod
    async def open(self, timeout: float | None = None) -> None:
        """
        Open the transport connection.

        If a connection is already held it is closed first and replaced.

        Args:
            timeout: Connect timeout in seconds. None uses transport default.

        Raises:
            ConnectionError: If the connection cannot be established in time.
        """
        ...

    @abstractmethod
    async def close(self) -> None:
        """
        Close the transport connection.

        Releases the connection and any associated resources.
        Safe to call multiple times (idempotent), including before open().
        """
        ...

    @abstractmethod
    async def write(self, data: bytes, timeout: float | None = None) -> None:
        """
        Write a complete frame to the transport.

        Args:
            data: Bytes to send.
            timeout: Write timeout in seconds. None uses transport default.

        Raises:
            TimeoutError: If the write does not complete in time.
            TransportError: If the transport is not open or write fails.
        """
        ...

    @abstractmethod
    async def read(self, max_bytes: int, timeout: float | None = None) -> bytes:
        """
        Perform a single read of up to max_bytes.

        Returns whatever arrives first; no continuation reads are made.

        Args:
            max_bytes: Upper bound on the number of bytes returned.
            timeout: Read timeout in seconds. None uses transport default.

        Returns:
            Between 1 and max_bytes bytes.

        Raises:
            TimeoutError: If no data arrives before the timeout.
            TransportError: If the transport is not open, the peer closed
                the connection, or the read fails.
        """
        ...

    async def __aenter__(self) -> AbstractTransport:
        """Async context manager entry - opens the transport."""
        await self.open()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Async context manager exit - closes the transport."""
        await self.close()
