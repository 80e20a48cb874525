"""Tests for tpzem/ __init__.py functions."""

from typing import Any
from unittest import mock

import pytest
import tpzem
from pydantic import ValidationError
from tpzem import send_reset


class _DummyProvider:
    instances: list["_DummyProvider"] = []  # noqa: RUF012

    def __init__(self, settings: Any) -> None:
        self.settings = settings
        _DummyProvider.instances.append(self)

    async def send_reset(self) -> bool:
        return True


async def test_send_reset() -> None:
    """Test that send_reset builds settings and delegates to the provider."""
    _DummyProvider.instances.clear()
    with mock.patch.object(tpzem, "PeacefairProvider", _DummyProvider):
        assert await send_reset("/dev/ttyUSB1", address=3, baudrate=4800, max_attempts=2) is True

    settings = _DummyProvider.instances[0].settings
    assert settings.port == "/dev/ttyUSB1"
    assert settings.address == 3
    assert settings.baudrate == 4800
    assert settings.stopbits == 2
    assert settings.max_attempts == 2
    assert settings.retry_delay == 0.5


async def test_send_reset_invalid_address() -> None:
    """Test that an invalid address is rejected before anything is sent."""
    with mock.patch.object(tpzem, "PeacefairProvider", _DummyProvider), pytest.raises(ValidationError):
        await send_reset("/dev/ttyUSB1", address=300)


def test_version() -> None:
    """Test that the package exposes a version."""
    assert isinstance(tpzem.__version__, str)
