"""
Mock transport for testing.

This module provides a mock transport implementation that allows testing
the scale client without a scale on the network. Replies are queued in
advance or generated from the written frame by a callback.

Example:
    >>> from scaledriver.transport import MockTransport
    >>> from scaledriver import ScaleClient
    >>>
    >>> mock = MockTransport()
    >>> mock.add_response(reply_bytes)
    >>>
    >>> async with ScaleClient(mock) as client:
    ...     reading = await client.read_weight()
"""

from __future__ import annotations

from collections import deque
from typing import Callable

from scaledriver.exceptions import ConnectionError, TimeoutError, TransportError
from scaledriver.transport.abc import AbstractTransport


class MockTransport(AbstractTransport):
    """
    Mock transport for testing without hardware.

    Each read() returns the next queued response (truncated to max_bytes).
    All written frames are recorded for verification.

    Attributes:
        written_data: List of all bytes written to the transport.
        open_count: Number of successful open() calls.
        close_count: Number of close() calls that closed an open connection.

    Example:
        >>> mock = MockTransport()
        >>> mock.add_response(b"\\x00" * 13)
        >>>
        >>> async with mock:
        ...     await mock.write(b"test")
        ...     reply = await mock.read(1024)
        ...     assert mock.written_data == [b"test"]
    """

    def __init__(self, address: str = "mock://scale") -> None:
        """
        Initialize the mock transport.

        Args:
            address: Identifier for the mock transport.
        """
        self._address = address
        self._is_open = False
        self._responses: deque[bytes] = deque()
        self._written_data: list[bytes] = []
        self._response_callback: Callable[[bytes], bytes | None] | None = None
        self._open_error: Exception | None = None
        self._write_error: Exception | None = None
        self._read_error: Exception | None = None
        self.open_count = 0
        self.close_count = 0
        self.last_timeout: float | None = None

    @property
    def is_open(self) -> bool:
        """Check if the mock transport is open."""
        return self._is_open

    @property
    def address(self) -> str:
        """Get the mock address."""
        return self._address

    @property
    def written_data(self) -> list[bytes]:
        """Get all data written to the transport."""
        return self._written_data.copy()

    @property
    def last_written(self) -> bytes | None:
        """Get the most recently written data."""
        return self._written_data[-1] if self._written_data else None

    def add_response(self, response: bytes) -> None:
        """
        Queue a reply for the next read.

        Args:
            response: Bytes to return on next read.
        """
        self._responses.append(bytes(response))

    def add_responses(self, *responses: bytes) -> None:
        """Queue multiple replies in FIFO order."""
        for response in responses:
            self.add_response(response)

    def set_response_callback(
        self,
        callback: Callable[[bytes], bytes | None] | None,
    ) -> None:
        """
        Set a callback to generate replies from written frames.

        The callback receives the written data and returns the reply to
        queue, or None to queue nothing.
        """
        self._response_callback = callback

    def fail_open(self, error: Exception | None) -> None:
        """Make the next open() calls raise ConnectionError wrapping error."""
        self._open_error = error

    def fail_write(self, error: Exception | None) -> None:
        """Make the next write() calls raise TransportError wrapping error."""
        self._write_error = error

    def fail_read(self, error: Exception | None) -> None:
        """Make the next read() calls raise TransportError wrapping error."""
        self._read_error = error

    def clear(self) -> None:
        """Clear all written data and pending responses."""
        self._written_data.clear()
        self._responses.clear()

    async def open(self, timeout: float | None = None) -> None:
        """Open the mock transport, replacing any open connection."""
        if self._is_open:
            await self.close()
        if self._open_error is not None:
            raise ConnectionError(f"Failed to connect to {self._address}: {self._open_error}")
        self._is_open = True
        self.open_count += 1

    async def close(self) -> None:
        """Close the mock transport."""
        if self._is_open:
            self.close_count += 1
        self._is_open = False

    async def write(self, data: bytes, timeout: float | None = None) -> None:
        """
        Record a frame and optionally trigger the response callback.

        Raises:
            TransportError: If transport is not open or a write error is set.
        """
        if not self._is_open:
            raise TransportError("Mock transport not open")
        if self._write_error is not None:
            raise TransportError(f"Write failed: {self._write_error}")

        self._written_data.append(bytes(data))

        if self._response_callback:
            response = self._response_callback(bytes(data))
            if response is not None:
                self._responses.append(bytes(response))

    async def read(self, max_bytes: int, timeout: float | None = None) -> bytes:
        """
        Return the next queued reply, truncated to max_bytes.

        Raises:
            TimeoutError: If no reply is queued.
            TransportError: If transport is not open or a read error is set.
        """
        if not self._is_open:
            raise TransportError("Mock transport not open")

        self.last_timeout = timeout

        if self._read_error is not None:
            raise TransportError(f"Read failed: {self._read_error}")

        if not self._responses:
            raise TimeoutError("No mock response available", timeout_seconds=timeout)

        return self._responses.popleft()[:max_bytes]

    def assert_written(self, expected: bytes, index: int = -1) -> None:
        """
        Assert that specific data was written.

        Raises:
            AssertionError: If data doesn't match.
        """
        if not self._written_data:
            raise AssertionError("No data written to mock transport")

        actual = self._written_data[index]
        if actual != expected:
            raise AssertionError(f"Written data mismatch: expected {expected!r}, got {actual!r}")

    def assert_write_count(self, expected: int) -> None:
        """
        Assert number of write operations.

        Raises:
            AssertionError: If count doesn't match.
        """
        actual = len(self._written_data)
        if actual != expected:
            raise AssertionError(f"Write count mismatch: expected {expected}, got {actual}")

    def __repr__(self) -> str:
        status = "open" if self._is_open else "closed"
        return f"MockTransport({self._address!r}, {status}, pending={len(self._responses)})"
