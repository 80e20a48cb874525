"""Exceptions."""

from typing import Any


class TPzemError(Exception):
    """Base exception class for the tPZEM library."""


class SerialConnectionError(TPzemError):
    """Serial connection error exception.

    Raised when the serial port cannot be used to talk to the meter.
    """

    response_bytes: bytes
    """The bytes that were read before the connection error occurred. Can be empty."""

    def __init__(self, *args: Any, bytes_read: bytes | None = None, **kwargs: Any) -> None:
        """Initialize SerialConnectionError."""
        super().__init__(*args, **kwargs)
        self.response_bytes = bytes_read or b""


class SerialOpenError(SerialConnectionError):
    """The serial port could not be opened.

    Opening the port is never retried: the command is aborted.
    """


class InvalidFrameError(TPzemError):
    """Invalid frame error exception.

    Raised when bytes received from the meter do not form a valid command frame.
    """

    response_bytes: bytes

    def __init__(self, *args: Any, response_bytes: bytes, **kwargs: Any) -> None:
        """Initialize InvalidFrameError."""
        super().__init__(*args, **kwargs)
        self.response_bytes = response_bytes


class CRCError(InvalidFrameError):
    """CRC validation error exception.

    Raised when the checksum of a received frame does not match its contents.
    """
