"""Transport layer."""

from .async_base import AsyncBaseSession
from .async_serial import AsyncSerialSession, PySerialOptions

__all__ = [
    "AsyncBaseSession",
    "AsyncSerialSession",
    "PySerialOptions",
]
