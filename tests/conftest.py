"""Shared fixtures."""

from collections.abc import Callable

import pytest
from tpzem.transport.async_base import AsyncBaseSession


class ScriptedSession(AsyncBaseSession):
    """A session that answers every write with the next scripted response.

    A response of None echoes the written bytes back.
    """

    def __init__(self, port: str = "/dev/ttyTEST", responses: list[bytes | None] | None = None) -> None:
        """Initialize the scripted session."""
        self.port = port
        self.responses = list(responses or [])
        self.written: list[bytes] = []
        self.opened = False
        self.open_count = 0
        self.close_count = 0
        self._pending = b""

    async def open(self) -> None:
        """Open the session."""
        self.open_count += 1
        self.opened = True

    async def close(self) -> None:
        """Close the session."""
        self.close_count += 1
        self.opened = False

    def is_open(self) -> bool:
        """Check if the session is open."""
        return self.opened

    async def write(self, data: bytes) -> None:
        """Record the frame and queue the scripted response."""
        self.written.append(data)
        response = self.responses.pop(0) if self.responses else b""
        self._pending = data if response is None else response

    async def read_exactly(self, size: int) -> bytes:
        """Return the queued response, truncated to `size`."""
        data, self._pending = self._pending[:size], self._pending[size:]
        return data


@pytest.fixture
def scripted_session() -> Callable[..., ScriptedSession]:
    """Fixture returning a factory of scripted sessions."""
    return ScriptedSession
