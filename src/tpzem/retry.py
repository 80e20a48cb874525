"""Retry coordinator for raw serial commands.

A command is sent at most `max_attempts` times. The first attempt fires
immediately, every following attempt waits `retry_delay` seconds first.
The coordinator stops as soon as the meter echoes the command.

    IDLE -> ATTEMPTING -> SUCCEEDED
                       -> EXHAUSTED
                       -> CANCELLED
                       -> FAILED

Only a mismatching response is retried. Errors raised by the exchange, such as a lost
connection, end the run immediately in the FAILED state and are propagated to the caller,
as is cancellation.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from enum import StrEnum

from tenacity import (
    AsyncRetrying,
    RetryError,
    before_sleep_log,
    retry_if_result,
    stop_after_attempt,
    wait_fixed,
)

from tpzem.exchange import exchange as default_exchange
from tpzem.transport.async_base import AsyncBaseSession

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_RETRY_DELAY = 0.5  # seconds between two attempts

type ExchangeFunc = Callable[[AsyncBaseSession, bytes], Awaitable[bool]]
type SleepFunc = Callable[[float], Awaitable[None]]


class ResetState(StrEnum):
    """States of a coordinator run."""

    IDLE = "idle"
    ATTEMPTING = "attempting"
    SUCCEEDED = "succeeded"
    EXHAUSTED = "exhausted"
    CANCELLED = "cancelled"
    FAILED = "failed"


def _is_mismatch(matched: bool) -> bool:  # noqa: FBT001
    return not matched


class RetryCoordinator:
    """Repeat a send-and-verify exchange until the meter acknowledges it.

    Example:
        >>> coordinator = RetryCoordinator()
        >>> async with AsyncSerialSession("/dev/ttyUSB0", baudrate=9600) as session:
        ...     success = await coordinator.run(session, build_reset_frame(1).bytes)

    """

    state: ResetState
    attempts: int

    def __init__(
        self,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        retry_delay: float = DEFAULT_RETRY_DELAY,
        *,
        exchange: ExchangeFunc = default_exchange,
        sleep: SleepFunc = asyncio.sleep,
    ) -> None:
        """Initialize Retry Coordinator.

        Args:
            max_attempts: Total number of attempts, the first one included (default: 3)
            retry_delay: Wait time before every attempt but the first, in seconds (default: 0.5s)
            exchange: Coroutine function performing one write-read-compare cycle
            sleep: Coroutine function used to wait between attempts

        """
        if max_attempts < 1:
            msg = "max_attempts must be at least 1"
            raise ValueError(msg)
        self.max_attempts = max_attempts

        if retry_delay < 0:
            msg = "retry_delay must be a positive value"
            raise ValueError(msg)
        self.retry_delay = retry_delay

        self._exchange = exchange
        self._sleep = sleep

        self.state = ResetState.IDLE
        self.attempts = 0

    def _retrying(self) -> AsyncRetrying:
        return AsyncRetrying(
            sleep=self._sleep,
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_fixed(self.retry_delay),
            retry=retry_if_result(_is_mismatch),
            before_sleep=before_sleep_log(logger, logging.DEBUG),
            reraise=True,
        )

    async def run(self, session: AsyncBaseSession, frame: bytes) -> bool:
        """Send `frame` through `session` until it is echoed or the attempts are exhausted.

        Returns:
            True if the meter acknowledged the frame, False once all attempts failed

        Raises:
            asyncio.CancelledError: When cancelled while waiting or reading
            SerialConnectionError: When the session fails during an exchange

        """
        self.state = ResetState.ATTEMPTING
        self.attempts = 0

        try:
            async for attempt in self._retrying():
                with attempt:
                    self.attempts = attempt.retry_state.attempt_number
                    matched = await self._exchange(session, frame)
                    logger.debug("Attempt %d - Success: %s", self.attempts, matched)

                if attempt.retry_state.outcome and not attempt.retry_state.outcome.failed:
                    attempt.retry_state.set_result(matched)
        except RetryError:
            self.state = ResetState.EXHAUSTED
            logger.warning("No acknowledgment after %d attempts", self.attempts)
            return False
        except asyncio.CancelledError:
            self.state = ResetState.CANCELLED
            logger.debug("Cancelled during attempt %d", self.attempts)
            raise
        except Exception:
            self.state = ResetState.FAILED
            logger.debug("Exchange error during attempt %d", self.attempts)
            raise

        self.state = ResetState.SUCCEEDED
        return True
