"""
Pydantic models for scale readings.

Models are immutable and validated on construction, so a Reading that
exists always holds values that fit the wire format.
"""

from __future__ import annotations

from typing import Annotated, Final

from pydantic import BaseModel, ConfigDict, Field

INT32_MIN: Final[int] = -(2**31)
INT32_MAX: Final[int] = 2**31 - 1

Int32 = Annotated[int, Field(ge=INT32_MIN, le=INT32_MAX)]
"""Signed 32-bit integer as carried on the wire."""


class Reading(BaseModel):
    """
    One decoded "get weight" reply.

    Weight and tare are in the scale's native units. Tare is optional:
    None means the reply did not carry the extended field, which is not
    the same thing as a tare of zero.

    Example:
        >>> reading = Reading(weight=12345, division=2, stable=True, net=False, zero=True)
        >>> reading.has_tare
        False
        >>> str(reading)
        '12345 (stable, zero)'
    """

    model_config = ConfigDict(frozen=True)

    weight: Int32 = Field(description="Signed weight, device units")
    division: int = Field(ge=0, le=255, description="Scale graduation indicator")
    stable: bool = Field(description="Measurement has settled")
    net: bool = Field(description="Scale is in net (tared) mode")
    zero: bool = Field(description="Scale reports zero point")
    tare: Int32 | None = Field(default=None, description="Signed tare, None when not reported")
    raw: bytes = Field(default=b"", repr=False, description="Reply bytes as received")

    @property
    def has_tare(self) -> bool:
        """Check whether the reply carried a tare value."""
        return self.tare is not None

    def __str__(self) -> str:
        flags = [name for name in ("stable", "net", "zero") if getattr(self, name)]
        text = f"{self.weight}"
        if flags:
            text += f" ({', '.join(flags)})"
        if self.tare is not None:
            text += f" tare={self.tare}"
        return text
