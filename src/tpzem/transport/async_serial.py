"""Async Serial Session Implementation.

The reset energy command of the PZEM meters is not a Modbus request, so it cannot
be sent through a Modbus client. This session gives raw access to the serial line:
the caller writes a frame and reads a fixed number of bytes back.

There is no frame detection here. Incoming bytes are buffered by the protocol
and handed out by `read_exactly`, which waits until enough bytes arrived or the
read timeout expired, whichever comes first.
"""

import asyncio
import logging
from collections.abc import Callable
from functools import partial
from typing import NotRequired, TypedDict, Unpack

import serial_asyncio_fast

from tpzem.exceptions import SerialConnectionError, SerialOpenError
from tpzem.utils.raw_traffic_logger import format_bytes
from tpzem.utils.raw_traffic_logger import log_raw_traffic as base_log_raw_traffic
from tpzem.utils.raw_traffic_logger import log_response as base_log_response

from .async_base import AsyncBaseSession

logger = logging.getLogger(__name__)
log_raw_traffic = partial(base_log_raw_traffic, "SERIAL")
log_response = partial(base_log_response, "SERIAL")


DEFAULT_TIMEOUT = 1.0  # Default read timeout in seconds


class PySerialOptions(TypedDict):
    """Options for the PySerial connection."""

    baudrate: int
    bytesize: NotRequired[int]
    parity: NotRequired[str]
    stopbits: NotRequired[float]
    timeout: NotRequired[float | None]
    xonxoff: NotRequired[bool]
    rtscts: NotRequired[bool]
    write_timeout: NotRequired[float | None]
    dsrdtr: NotRequired[bool]
    inter_byte_timeout: NotRequired[float | None]


class AsyncSerialSession(AsyncBaseSession):
    """Async raw serial session.

    Handles:
    - Async serial port connection management
    - Writing raw frames
    - Bounded reads of a fixed number of bytes
    """

    _transport: asyncio.WriteTransport | None = None
    _protocol: "RawSerialProtocol | None" = None

    def __init__(
        self,
        port: str,
        **pyserial_options: Unpack[PySerialOptions],
    ) -> None:
        """Initialize async serial session.

        Args:
            port: Target serial port (e.g., '/dev/ttyUSB0')
            pyserial_options: PySerial options like baudrate, bytesize, parity, stopbits and timeout.
                              `timeout` bounds both opening the port and every read.

        """
        self.port = port
        self.pyserial_options = pyserial_options

        timeout = pyserial_options.get("timeout")
        if timeout is None:
            timeout = DEFAULT_TIMEOUT
        self.timeout = timeout

    def __repr__(self) -> str:
        """Show the port this session talks to."""
        return f"{type(self).__name__}(port={self.port!r})"

    async def open(self) -> None:
        """Open the serial port."""
        if self.is_open():
            logger.debug("Serial port already open: %s", self.port)
            return

        loop = asyncio.get_running_loop()
        try:
            transport, protocol = await asyncio.wait_for(
                serial_asyncio_fast.create_serial_connection(
                    loop,
                    lambda: RawSerialProtocol(
                        on_connection_lost=self._on_connection_lost,
                        timeout=self.timeout,
                    ),
                    url=self.port,
                    **self.pyserial_options,
                ),
                timeout=self.timeout,
            )

            assert isinstance(transport, asyncio.WriteTransport)
            assert isinstance(protocol, RawSerialProtocol)
            self._transport = transport
            self._protocol = protocol

            # pyserial can be slow to call connection_made, we explicitly wait for it here
            await asyncio.wait_for(protocol.connection_made_event.wait(), timeout=self.timeout)
        except asyncio.CancelledError:
            self._abort()
            raise
        except TimeoutError as e:
            logger.debug("Timeout while opening serial port: %s", self.port)
            self._abort()
            msg = f"Timeout while opening serial port {self.port}"
            raise SerialOpenError(msg) from e
        except Exception as e:
            logger.debug("Cannot open serial port %s: %s", self.port, e)
            self._abort()
            msg = f"Cannot open serial port {self.port}: {e}"
            raise SerialOpenError(msg) from e

        logger.info("Serial port opened: %s", self.port)

    def _abort(self) -> None:
        """Drop a half-opened transport."""
        if self._transport is not None and not self._transport.is_closing():
            self._transport.close()
        self._transport = None
        self._protocol = None

    async def close(self) -> None:
        """Close the serial port."""
        if not self._transport or self._transport.is_closing():
            logger.debug("Serial port already closed: %s", self.port)
            return

        try:
            self._transport.close()
            logger.info("Serial port closed: %s", self.port)
        except Exception as e:  # noqa: BLE001
            logger.debug("Error while closing serial port %s: %s", self.port, e)
        finally:
            self._transport = None
            self._protocol = None

    def is_open(self) -> bool:
        """Check serial port status."""
        return self._transport is not None and not self._transport.is_closing()

    def _on_connection_lost(self, exc: Exception | None) -> None:
        if exc:
            logger.error("Serial connection to %s lost due to error: %s", self.port, exc)
        else:
            logger.debug("Serial connection to %s closed.", self.port)

        self._transport = None
        self._protocol = None

    def _get_protocol(self) -> "RawSerialProtocol":
        if not self.is_open() or self._protocol is None:
            msg = f"Serial port {self.port} is not open."
            raise SerialConnectionError(msg)
        return self._protocol

    async def write(self, data: bytes) -> None:
        """Write raw bytes to the serial port."""
        self._get_protocol().write(data)

    async def read_exactly(self, size: int) -> bytes:
        """Read `size` bytes, or what arrived before the read timeout."""
        return await self._get_protocol().read_exactly(size)


class RawSerialProtocol(asyncio.Protocol):
    """Asyncio Protocol that buffers whatever the meter sends."""

    transport: "asyncio.WriteTransport | None" = None

    on_connection_lost: Callable[[Exception | None], None]
    timeout: float

    _buffer: bytearray
    _last_sent: bytes
    _data_received_event: asyncio.Event
    _connection_lost: bool

    def __init__(
        self,
        *,
        on_connection_lost: Callable[[Exception | None], None],
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        """Initialize Raw Serial Protocol."""
        super().__init__()

        self.on_connection_lost = on_connection_lost
        self.timeout = timeout

        self._buffer = bytearray()
        self._last_sent = b""
        self._data_received_event = asyncio.Event()
        self._connection_lost = False

        self.connection_made_event = asyncio.Event()

    def connection_made(self, transport: asyncio.BaseTransport) -> None:
        """Handle connection made event."""
        if not isinstance(transport, asyncio.WriteTransport):
            msg = "Expected a WriteTransport"
            raise TypeError(msg)

        self.transport = transport
        self.connection_made_event.set()

    def write(self, data: bytes) -> None:
        """Write a frame, dropping any unread bytes left from a previous exchange."""
        if self.transport is None or self.transport.is_closing():
            msg = "Not connected."
            raise SerialConnectionError(msg)

        if self._buffer:
            logger.warning(
                "Discarding %d stale byte(s) before writing: %s",
                len(self._buffer),
                format_bytes(bytes(self._buffer)),
            )
            self._buffer.clear()

        self.transport.write(data)
        self._last_sent = data
        log_raw_traffic("sent", data)

    async def read_exactly(self, size: int) -> bytes:
        """Wait for `size` bytes or until the timeout expires.

        Returns:
            At most `size` bytes. Fewer when the timeout expired first.
            The raw traffic line is marked unless the bytes echo the last written frame.

        Raises:
            SerialConnectionError: When the connection is lost before enough bytes arrived

        """
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self.timeout

        while len(self._buffer) < size:
            if self._connection_lost:
                msg = "Connection lost before response was received."
                raise SerialConnectionError(msg, bytes_read=bytes(self._buffer))

            remaining = deadline - loop.time()
            if remaining <= 0:
                break

            self._data_received_event.clear()
            try:
                await asyncio.wait_for(self._data_received_event.wait(), timeout=remaining)
            except TimeoutError:
                logger.debug("Read timeout after %.2f seconds", self.timeout)
                break

        data = bytes(self._buffer[:size])
        del self._buffer[:size]
        log_response(self._last_sent, data)
        return data

    def data_received(self, data: bytes) -> None:
        """Handle data received event."""
        self._buffer.extend(data)
        self._data_received_event.set()

    def connection_lost(self, exc: Exception | None) -> None:
        """Handle connection lost event."""
        self._connection_lost = True
        self.transport = None
        self._data_received_event.set()
        self.on_connection_lost(exc)
