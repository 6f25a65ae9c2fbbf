"""
Data models for scale protocol replies.

- Reading: decoded weight, division, status flags and optional tare
"""

from scaledriver.models.records import Reading

__all__ = [
    "Reading",
]
