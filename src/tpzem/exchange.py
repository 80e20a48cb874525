"""Send a command frame and verify the meter's echo."""

import logging

from tpzem.frame import describe_response
from tpzem.transport.async_base import AsyncBaseSession
from tpzem.utils.raw_traffic_logger import format_bytes

logger = logging.getLogger(__name__)


async def exchange(session: AsyncBaseSession, frame: bytes) -> bool:
    """Write `frame` and check that the meter echoes it back unchanged.

    The meter acknowledges a raw command by returning the exact bytes it received.
    A short read, a timeout without data or any differing byte is a mismatch.
    The checksum of the response is not validated separately.

    Args:
        session: An open serial session
        frame: Complete frame, checksum included

    Returns:
        True if the response is byte-for-byte identical to `frame`

    Raises:
        SerialConnectionError: When the session is closed or the connection is lost

    """
    logger.debug("Sending message %s...", format_bytes(frame))
    await session.write(frame)

    logger.debug("Waiting for response...")
    received = await session.read_exactly(len(frame))
    logger.debug("Received response: %s", format_bytes(received))

    if received == frame:
        return True

    logger.debug("Response is not an echo of the command: %s", describe_response(frame, received))
    return False
