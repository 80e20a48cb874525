"""Connection settings using pydantic-settings."""

import logging
import sys
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from tpzem.retry import DEFAULT_MAX_ATTEMPTS, DEFAULT_RETRY_DELAY
from tpzem.transport.async_serial import DEFAULT_TIMEOUT, PySerialOptions


class ProviderSettings(BaseSettings):
    """Settings of a Peacefair meter connection.

    All settings can be overridden via environment variables
    prefixed with TPZEM_ (e.g., TPZEM_PORT).
    """

    address: int = Field(default=1, ge=0, le=255)
    port: str = "/dev/ttyUSB0"
    baudrate: int = Field(default=9600, gt=0)
    bytesize: int = 8
    parity: Literal["N", "E", "O", "M", "S"] = "N"
    stopbits: float = 2
    timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0)
    max_attempts: int = Field(default=DEFAULT_MAX_ATTEMPTS, ge=1)
    retry_delay: float = Field(default=DEFAULT_RETRY_DELAY, ge=0)

    model_config = SettingsConfigDict(env_prefix="TPZEM_")

    @field_validator("bytesize")
    @classmethod
    def _check_bytesize(cls, value: int) -> int:
        if value not in (5, 6, 7, 8):
            msg = "bytesize must be one of 5, 6, 7 or 8"
            raise ValueError(msg)
        return value

    @field_validator("stopbits")
    @classmethod
    def _check_stopbits(cls, value: float) -> float:
        if value not in (1, 1.5, 2):
            msg = "stopbits must be one of 1, 1.5 or 2"
            raise ValueError(msg)
        return value

    def pyserial_options(self) -> PySerialOptions:
        """Options to open the serial port with."""
        return PySerialOptions(
            baudrate=self.baudrate,
            bytesize=self.bytesize,
            parity=self.parity,
            stopbits=self.stopbits,
            timeout=self.timeout,
        )


def setup_logging(level: str = "INFO") -> None:
    """Configure logging for scripts using the library.

    Args:
        level: Log level string (DEBUG, INFO, WARNING, ERROR, CRITICAL).

    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=numeric_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )
