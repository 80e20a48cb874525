"""Tests for tpzem/commands.py ."""

import logging

import pytest
from tpzem.commands import Command, CommandDispatcher, CommandOption


async def test_dispatch() -> None:
    """Test that a command identifier is routed to its handler."""
    calls: list[str] = []

    async def reset() -> bool:
        calls.append("reset")
        return True

    async def other() -> bool:
        calls.append("other")
        return False

    dispatcher = CommandDispatcher()
    dispatcher.register("66", reset)
    dispatcher.register("67", other)

    assert "66" in dispatcher
    assert await dispatcher.dispatch("66") is True
    assert await dispatcher.dispatch("67") is False
    assert calls == ["reset", "other"]


async def test_dispatch_unknown(caplog: pytest.LogCaptureFixture) -> None:
    """Test that an unknown identifier is logged and reported as failure."""
    dispatcher = CommandDispatcher()

    with caplog.at_level(logging.WARNING, logger="tpzem.commands"):
        assert await dispatcher.dispatch("99") is False

    assert "99" not in dispatcher
    assert "No valid command: 99" in caplog.text


def test_register_duplicate() -> None:
    """Test that registering an identifier twice raises ValueError."""

    async def handler() -> bool:
        return True

    dispatcher = CommandDispatcher()
    dispatcher.register("66", handler)

    with pytest.raises(ValueError, match=r".* already registered."):
        dispatcher.register("66", handler)


def test_command_defaults() -> None:
    """Test the default values of a command description."""
    command = Command(provider="Peacefair", label="peacefair.reset")
    assert command.options == []
    assert command.default_value is None

    option = CommandOption("66", "peacefair.reset.action")
    assert option.value == "66"
    assert option.text == "peacefair.reset.action"
