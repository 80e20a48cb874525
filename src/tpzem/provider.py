"""Peacefair energy meter provider.

Reading the measurement registers is done by a regular Modbus client.
This provider adds the device commands that are not part of the Modbus
register map, which for the PZEM meters is the reset energy command.

See https://en.peacefair.cn/product/786.html for the device description.
"""

import asyncio
import logging
from collections.abc import Callable

from tpzem.commands import Command, CommandDispatcher, CommandOption
from tpzem.config import ProviderSettings
from tpzem.exceptions import SerialOpenError
from tpzem.frame import build_reset_frame
from tpzem.retry import RetryCoordinator
from tpzem.transport.async_base import AsyncBaseSession
from tpzem.transport.async_serial import AsyncSerialSession

logger = logging.getLogger(__name__)

PROVIDER_NAME = "Peacefair"
RESET_COMMAND = "66"

type SessionFactory = Callable[..., AsyncBaseSession]


def default_settings() -> ProviderSettings:
    """Factory settings of the Peacefair meters: 9600 baud, 8N2, address 1."""
    return ProviderSettings(address=1, baudrate=9600, bytesize=8, parity="N", stopbits=2)


class PeacefairProvider:
    """Commands for a Peacefair PZEM energy meter on a serial line.

    Example:
        >>> provider = PeacefairProvider(ProviderSettings(port="/dev/ttyUSB0", address=1))
        >>> await provider.send_command("66")
        True

    """

    def __init__(
        self,
        settings: ProviderSettings | None = None,
        *,
        session_factory: SessionFactory = AsyncSerialSession,
        coordinator: RetryCoordinator | None = None,
    ) -> None:
        """Initialize the provider.

        Args:
            settings: Connection settings, defaults to `default_settings()`
            session_factory: Callable creating a serial session from a port and pyserial options
            coordinator: Retry coordinator to use, built from the settings when omitted

        """
        self.settings = settings or default_settings()
        self._session_factory = session_factory
        self.coordinator = coordinator or RetryCoordinator(
            max_attempts=self.settings.max_attempts,
            retry_delay=self.settings.retry_delay,
        )

        self._dispatcher = CommandDispatcher()
        self._dispatcher.register(RESET_COMMAND, self.send_reset)

    def available_commands(self) -> list[Command]:
        """Commands offered to the user."""
        return [
            Command(
                provider=PROVIDER_NAME,
                label="peacefair.reset",
                options=[CommandOption(RESET_COMMAND, "peacefair.reset.action")],
                default_value=int(RESET_COMMAND),
            )
        ]

    async def send_command(self, send: str) -> bool:
        """Execute the command selected by `send`.

        Returns:
            True if the command was acknowledged by the meter

        """
        return await self._dispatcher.dispatch(send)

    def _create_session(self) -> AsyncBaseSession:
        return self._session_factory(self.settings.port, **self.settings.pyserial_options())

    async def send_reset(self) -> bool:
        """Reset the energy counter of the meter.

        This is not a Modbus request: the frame is sent over a dedicated serial
        session, which is opened for this command only and always closed afterwards.

        Returns:
            True if the meter echoed the command, False on any failure

        Raises:
            asyncio.CancelledError: When cancelled, after the serial port was released

        """
        frame = build_reset_frame(self.settings.address)
        logger.info("Send command 'reset' %s", frame.hex())

        try:
            async with self._create_session() as session:
                success = await self.coordinator.run(session, frame.bytes)
        except asyncio.CancelledError:
            logger.warning("Command 'reset' cancelled for serial port: %s", self.settings.port)
            raise
        except SerialOpenError as e:
            logger.error("Cannot send reset command, reason: %s", e)  # noqa: TRY400
            return False
        except Exception:
            logger.exception("Cannot send reset command to serial port: %s", self.settings.port)
            return False

        if success:
            logger.info("Command 'reset' successful")
        else:
            logger.error(
                "Command 'reset' failed after %d attempts for serial port: %s",
                self.coordinator.attempts,
                self.settings.port,
            )
        return success
