"""
scaledriver - Python client for reading weights from electronic scales.

This library sends the "get weight" command to a scale over TCP (or a
serial port) and decodes the binary reply into a Reading with weight,
division, stable/net/zero flags and an optional tare.

Example:
    >>> from scaledriver import ScaleClient
    >>>
    >>> async def main():
    ...     async with ScaleClient.tcp("192.168.1.50:5001") as client:
    ...         reading = await client.read_weight()
    ...         print(reading.weight, reading.tare if reading.has_tare else "-")
"""

from scaledriver.client import ClientState, ScaleClient, ScaleDriver
from scaledriver.exceptions import (
    ConnectionError,
    ProtocolError,
    ScaleDriverError,
    ShortResponseError,
    TimeoutError,
    TransportError,
)
from scaledriver.models.records import Reading
from scaledriver.protocol.checksums import calculate_crc16_ccitt
from scaledriver.protocol.constants import CommandCode
from scaledriver.protocol.frames import build_command, parse_response
from scaledriver.transport import (
    AbstractTransport,
    AsyncSerialTransport,
    AsyncTcpTransport,
    MockTransport,
)

__version__ = "0.1.0"
__all__ = [
    # Client
    "ScaleClient",
    "ScaleDriver",
    "ClientState",
    # Models
    "Reading",
    # Protocol
    "CommandCode",
    "build_command",
    "parse_response",
    "calculate_crc16_ccitt",
    # Exceptions
    "ScaleDriverError",
    "ConnectionError",
    "TransportError",
    "TimeoutError",
    "ProtocolError",
    "ShortResponseError",
    # Transport
    "AbstractTransport",
    "AsyncTcpTransport",
    "AsyncSerialTransport",
    "MockTransport",
    # Version
    "__version__",
]
