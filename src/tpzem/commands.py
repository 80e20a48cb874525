"""Commands a provider offers to the surrounding framework.

The framework shows the available commands to the user and sends the chosen
option back as a plain string, which is dispatched to the matching handler.
"""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

type CommandHandler = Callable[[], Awaitable[bool]]


@dataclass(frozen=True)
class CommandOption:
    """A selectable option of a command: the value sent back and its resource text key."""

    value: str
    text: str


@dataclass(frozen=True)
class Command:
    """Description of a command offered by a provider."""

    provider: str
    label: str
    options: list[CommandOption] = field(default_factory=list)
    default_value: int | None = None


class CommandDispatcher:
    """Route command identifiers to their handlers."""

    def __init__(self) -> None:
        """Initialize an empty dispatcher."""
        self._handlers: dict[str, CommandHandler] = {}

    def register(self, identifier: str, handler: CommandHandler) -> None:
        """Register `handler` for `identifier`.

        Raises:
            ValueError: If a handler is already registered for this identifier

        """
        if identifier in self._handlers:
            msg = f"A handler for command {identifier!r} is already registered."
            raise ValueError(msg)
        self._handlers[identifier] = handler

    def __contains__(self, identifier: object) -> bool:
        """Check if a handler is registered for `identifier`."""
        return identifier in self._handlers

    async def dispatch(self, identifier: str) -> bool:
        """Run the handler registered for `identifier`.

        Returns:
            The handler's outcome, or False if the identifier is unknown

        """
        handler = self._handlers.get(identifier)
        if handler is None:
            logger.warning("No valid command: %s", identifier)
            return False
        return await handler()
