"""Async serial session base class.

Defines the interface used by the command exchange to talk to the meter.
"""

from abc import ABC, abstractmethod
from types import TracebackType
from typing import Self


class AsyncBaseSession(ABC):
    """Session Base Class.

    A session exclusively owns one serial handle for the duration of a command.
    It is opened fresh for every command and closed on every exit path when
    used as an async context manager.
    """

    port: str

    @abstractmethod
    async def open(self) -> None:
        """Open the serial port.

        Raises:
            SerialOpenError: When the port cannot be opened

        """

    @abstractmethod
    async def close(self) -> None:
        """Close the serial port and release the handle."""

    @abstractmethod
    def is_open(self) -> bool:
        """Check Session Status.

        Returns:
            True if the port is open and usable, False otherwise

        """

    @abstractmethod
    async def write(self, data: bytes) -> None:
        """Write raw bytes to the serial line.

        Raises:
            SerialConnectionError: When the session is not open

        """

    @abstractmethod
    async def read_exactly(self, size: int) -> bytes:
        """Read `size` bytes from the serial line.

        The read is bounded by the session timeout. When it expires,
        the bytes received so far are returned, which can be fewer than `size`.

        Raises:
            SerialConnectionError: When the connection is lost while reading

        """

    async def __aenter__(self) -> Self:
        """Async Context Manager Entry."""
        await self.open()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Async Context Manager Exit."""
        await self.close()
