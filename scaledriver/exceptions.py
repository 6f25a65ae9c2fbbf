"""
Exception hierarchy for scaledriver.

All exceptions inherit from ScaleDriverError. The hierarchy keeps three
kinds of failure apart so callers can decide what to do about each:

1. Connection errors: the transport could not be established
2. Transport errors: an established connection failed to write or read
3. Protocol errors: bytes arrived but could not be decoded into a reading
"""

from __future__ import annotations


class ScaleDriverError(Exception):
    """
    Base exception for all scaledriver errors.

    All library-specific exceptions inherit from this class, allowing
    callers to catch all scaledriver errors with a single except clause.
    """

    pass


class ConnectionError(ScaleDriverError):  # noqa: A001 - intentionally shadows builtin
    """
    Scale connection error.

    Raised when:
    - The TCP connection (or serial port) cannot be established
    - Establishing the connection takes longer than the connect timeout
    - An operation needs a connection but none is open
    """

    pass


class TransportError(ScaleDriverError):
    """
    Transport-level error on an established connection.

    Raised for:
    - Write failures
    - Read failures
    - The peer closing the connection before replying
    """

    pass


class TimeoutError(TransportError):  # noqa: A001 - intentionally shadows builtin
    """
    Communication timeout.

    Raised when a write does not complete, or no reply arrives, within the
    configured deadline. The scale may be busy or unreachable.
    """

    def __init__(
        self,
        message: str = "Communication timeout",
        *,
        timeout_seconds: float | None = None,
    ) -> None:
        super().__init__(message)
        self.timeout_seconds = timeout_seconds

    def __str__(self) -> str:
        base = super().__str__()
        if self.timeout_seconds is not None:
            return f"{base} (after {self.timeout_seconds:.1f}s)"
        return base


class ProtocolError(ScaleDriverError):
    """
    Protocol-level error.

    Raised when the scale's reply cannot be decoded into a reading.
    """

    pass


class ShortResponseError(ProtocolError):
    """
    Reply too short to hold the mandatory fields.

    A weight reply needs at least the status byte, weight, division and the
    three flag bytes. Anything shorter is rejected rather than partially
    decoded.
    """

    def __init__(
        self,
        message: str = "Response too short",
        *,
        expected: int | None = None,
        received: int | None = None,
    ) -> None:
        super().__init__(message)
        self.expected = expected
        self.received = received

    def __str__(self) -> str:
        base = super().__str__()
        if self.expected is not None and self.received is not None:
            return f"{base} (need at least {self.expected} bytes, got {self.received})"
        return base
