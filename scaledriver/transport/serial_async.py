"""
Async serial transport using pyserial-asyncio.

Some scales expose the same command protocol on an RS-232 port instead
of TCP. This transport implements the same contract as AsyncTcpTransport,
so the scale client and the frame codec work unchanged over it.

Serial Configuration:
- Baud rate: 9600 (default, configurable)
- Data bits: 8
- Parity: None
- Stop bits: 1
- Flow control: None

Example:
    >>> transport = AsyncSerialTransport("/dev/ttyUSB0")
    >>> async with transport:
    ...     await transport.write(frame)
    ...     reply = await transport.read(1024)
"""

from __future__ import annotations

import asyncio
import logging

import serial
import serial_asyncio

from scaledriver.exceptions import ConnectionError, TimeoutError, TransportError
from scaledriver.protocol.constants import ProtocolConstants
from scaledriver.transport.abc import AbstractTransport

logger = logging.getLogger(__name__)


class AsyncSerialTransport(AbstractTransport):
    """
    Async serial transport using pyserial-asyncio.

    Attributes:
        address: Serial port path (e.g., "/dev/ttyUSB0", "COM3").
        is_open: Whether the port is currently open.

    Example:
        >>> transport = AsyncSerialTransport("/dev/ttyUSB0", baudrate=9600)
        >>> await transport.open()
        >>> try:
        ...     await transport.write(build_command(CommandCode.GET_WEIGHT))
        ...     reply = await transport.read(1024, timeout=5.0)
        ... finally:
        ...     await transport.close()
    """

    def __init__(
        self,
        port: str,
        baudrate: int = ProtocolConstants.DEFAULT_BAUD_RATE,
        default_timeout: float = ProtocolConstants.DEFAULT_RECEIVE_TIMEOUT,
    ) -> None:
        """
        Initialize the async serial transport.

        Args:
            port: Serial port path (e.g., "/dev/ttyUSB0", "COM3").
            baudrate: Baud rate (default: 9600).
            default_timeout: Default open/read/write timeout in seconds.
        """
        self._port = port
        self._baudrate = baudrate
        self._default_timeout = default_timeout
        self._reader: asyncio.StreamReader | None = None
        self._writer: asyncio.StreamWriter | None = None

    @property
    def is_open(self) -> bool:
        """Check if the serial port is currently open."""
        return (
            self._writer is not None
            and not self._writer.is_closing()
            and self._reader is not None
        )

    @property
    def address(self) -> str:
        """Get the serial port path."""
        return self._port

    @property
    def baudrate(self) -> int:
        """Get the configured baud rate."""
        return self._baudrate

    async def open(self, timeout: float | None = None) -> None:
        """
        Open the serial port with 8N1 settings.

        Raises:
            ConnectionError: If the port cannot be opened.
        """
        if self._writer is not None:
            logger.debug("Reopening serial port %s", self._port)
            await self.close()

        effective_timeout = timeout if timeout is not None else self._default_timeout

        try:
            self._reader, self._writer = await asyncio.wait_for(
                serial_asyncio.open_serial_connection(
                    url=self._port,
                    baudrate=self._baudrate,
                    parity=serial.PARITY_NONE,
                    stopbits=serial.STOPBITS_ONE,
                    bytesize=serial.EIGHTBITS,
                    xonxoff=False,
                    rtscts=False,
                    dsrdtr=False,
                ),
                timeout=effective_timeout,
            )
        except asyncio.TimeoutError:
            raise ConnectionError(
                f"Timed out opening serial port {self._port} after {effective_timeout:.1f}s"
            ) from None
        except serial.SerialException as e:
            raise ConnectionError(f"Failed to open serial port {self._port}: {e}") from e
        except OSError as e:
            raise ConnectionError(f"OS error opening {self._port}: {e}") from e

        logger.info("Opened serial port %s at %d baud", self._port, self._baudrate)

    async def close(self) -> None:
        """
        Close the serial port.

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
        except (OSError, serial.SerialException) as e:
            logger.debug("Error while closing %s: %s", self._port, e)

        logger.info("Closed serial port %s", self._port)

    async def write(self, data: bytes, timeout: float | None = None) -> None:
        """
        Write a frame to the serial port.

        Raises:
            TimeoutError: If the write does not drain in time.
            TransportError: If the port is not open or write fails.
        """
        if not self.is_open:
            raise TransportError("Serial port is not open")

        effective_timeout = timeout if timeout is not None else self._default_timeout

        try:
            self._writer.write(data)
            await asyncio.wait_for(self._writer.drain(), timeout=effective_timeout)
        except asyncio.TimeoutError:
            raise TimeoutError(
                f"Timeout writing to {self._port}",
                timeout_seconds=effective_timeout,
            ) from None
        except (OSError, serial.SerialException) as e:
            raise TransportError(f"Write failed: {e}") from e

        logger.debug("Sent %d bytes to %s: %s", len(data), self._port, data.hex(" "))

    async def read(self, max_bytes: int, timeout: float | None = None) -> bytes:
        """
        Read one chunk of up to max_bytes from the serial port.

        Raises:
            TimeoutError: If nothing arrives before the timeout.
            TransportError: If the port is not open, was closed, or the read fails.
        """
        if not self.is_open:
            raise TransportError("Serial port is not open")

        effective_timeout = timeout if timeout is not None else self._default_timeout

        try:
            data = await asyncio.wait_for(
                self._reader.read(max_bytes),
                timeout=effective_timeout,
            )
        except asyncio.TimeoutError:
            raise TimeoutError(
                f"Timeout waiting for reply on {self._port}",
                timeout_seconds=effective_timeout,
            ) from None
        except (OSError, serial.SerialException) as e:
            raise TransportError(f"Read failed: {e}") from e

        if not data:
            raise TransportError(f"Serial port {self._port} closed")

        logger.debug("Received %d bytes from %s: %s", len(data), self._port, data.hex(" "))
        return data

    def __repr__(self) -> str:
        status = "open" if self.is_open else "closed"
        return f"AsyncSerialTransport({self._port!r}, baudrate={self._baudrate}, {status})"
