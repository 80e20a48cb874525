"""tPZEM library."""

from typing import Literal

from .commands import Command, CommandDispatcher, CommandOption
from .config import ProviderSettings
from .exchange import exchange
from .frame import RESET_FUNCTION_CODE, CommandFrame, build_reset_frame
from .provider import PeacefairProvider, default_settings
from .retry import ResetState, RetryCoordinator
from .transport import AsyncBaseSession, AsyncSerialSession, PySerialOptions
from .utils.crc import calculate_crc16

try:
    from ._version import __version__
except ImportError:  # pragma: no cover
    __version__ = "0.0.0"


async def send_reset(  # noqa: PLR0913
    port: str,
    *,
    address: int = 1,
    baudrate: int = 9600,
    parity: Literal["N", "E", "O", "M", "S"] = "N",
    stopbits: float = 2,
    timeout: float = 1.0,
    max_attempts: int = 3,
    retry_delay: float = 0.5,
) -> bool:
    """Reset the energy counter of the Peacefair meter at `address` on `port`.

    Args:
        port: Serial port the meter is connected to (e.g., '/dev/ttyUSB0').
        address: Slave address of the meter (0-255, default is 1).
        baudrate: Serial speed (default: 9600).
        parity: Parity, one of N, E, O, M, S (default: N).
        stopbits: Number of stop bits (default: 2).
        timeout: Timeout in seconds for opening the port and for each read (default: 1.0s).
        max_attempts: Number of times the command is sent before giving up (default: 3).
        retry_delay: Wait time before each retry in seconds (default: 0.5s).

    Returns:
        True if the meter acknowledged the reset, False otherwise.

    Raises:
        pydantic.ValidationError: If one of the settings is invalid.

    """
    settings = ProviderSettings(
        port=port,
        address=address,
        baudrate=baudrate,
        parity=parity,
        stopbits=stopbits,
        timeout=timeout,
        max_attempts=max_attempts,
        retry_delay=retry_delay,
    )
    return await PeacefairProvider(settings).send_reset()


__all__ = [
    "RESET_FUNCTION_CODE",
    "AsyncBaseSession",
    "AsyncSerialSession",
    "Command",
    "CommandDispatcher",
    "CommandFrame",
    "CommandOption",
    "PeacefairProvider",
    "ProviderSettings",
    "PySerialOptions",
    "ResetState",
    "RetryCoordinator",
    "build_reset_frame",
    "calculate_crc16",
    "default_settings",
    "exchange",
    "send_reset",
]
