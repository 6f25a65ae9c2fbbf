"""
Transport layer for scale communication.

This package provides transport implementations for talking to a scale
over different physical links.

Available transports:
- AsyncTcpTransport: TCP socket using asyncio streams
- AsyncSerialTransport: Serial port using pyserial-asyncio
- MockTransport: Mock transport for testing without hardware

Example:
    >>> from scaledriver.transport import AsyncTcpTransport
    >>> async with AsyncTcpTransport("192.168.1.50", 5001) as transport:
    ...     await transport.write(frame)
    ...     reply = await transport.read(1024)

Testing Example:
    >>> from scaledriver.transport import MockTransport
    >>> mock = MockTransport()
    >>> mock.add_response(reply_bytes)
"""

from scaledriver.transport.abc import AbstractTransport
from scaledriver.transport.mock import MockTransport
from scaledriver.transport.serial_async import AsyncSerialTransport
from scaledriver.transport.tcp import AsyncTcpTransport, parse_address

__all__ = [
    "AbstractTransport",
    "AsyncTcpTransport",
    "AsyncSerialTransport",
    "MockTransport",
    "parse_address",
]
