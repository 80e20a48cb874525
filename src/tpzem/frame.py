"""Command frames for the PZEM raw serial commands.

Some commands of the Peacefair PZEM energy meters are not part of the Modbus
register map. The energy reset is one of them: it is a bare frame made of the
slave address, the function code 0x42 and a CRC16, and the meter acknowledges
it by echoing the very same bytes back.

    +---------+----------+--------+--------+
    | address | function | crc lo | crc hi |
    +---------+----------+--------+--------+
"""

from dataclasses import dataclass
from typing import Self

from tpzem.exceptions import CRCError, InvalidFrameError
from tpzem.utils.crc import calculate_crc16, validate_crc16
from tpzem.utils.raw_traffic_logger import format_bytes

RESET_FUNCTION_CODE = 0x42
RESET_FRAME_LENGTH = 4  # address + function code + CRC


@dataclass(frozen=True)
class CommandFrame:
    """A raw command frame: address, function code and trailing CRC16."""

    address: int
    function_code: int

    def __post_init__(self) -> None:
        """Validate the address and function code."""
        if not (0 <= self.address <= 255):
            msg = "Address must be in range 0-255"
            raise ValueError(msg)
        if not (0 <= self.function_code <= 255):
            msg = "Function code must be in range 0-255"
            raise ValueError(msg)

    @classmethod
    def decode(cls, data: bytes) -> Self:
        """Parse a frame received from the meter.

        Raises:
            InvalidFrameError: If the data does not have the length of a command frame
            CRCError: If the checksum does not match

        """
        if len(data) != RESET_FRAME_LENGTH:
            msg = f"Expected a frame of {RESET_FRAME_LENGTH} bytes, received {len(data)}"
            raise InvalidFrameError(msg, response_bytes=data)
        if not validate_crc16(data):
            msg = f"CRC mismatch in frame {format_bytes(data)}"
            raise CRCError(msg, response_bytes=data)
        return cls(address=data[0], function_code=data[1])

    @property
    def payload(self) -> bytes:
        """Bytes covered by the checksum."""
        return bytes([self.address, self.function_code])

    @property
    def crc(self) -> bytes:
        """CRC16 of the payload, low byte first."""
        return calculate_crc16(self.payload)

    @property
    def bytes(self) -> bytes:
        """Full frame as it goes on the wire."""
        return self.payload + self.crc

    def hex(self) -> str:
        """Readable representation of the frame bytes."""
        return format_bytes(self.bytes)


def build_reset_frame(address: int) -> CommandFrame:
    """Build the reset energy command for the meter at `address`.

    Example:
        >>> build_reset_frame(1).hex()
        '01 42 80 11'

    """
    return CommandFrame(address=address, function_code=RESET_FUNCTION_CODE)


def describe_response(sent: bytes, received: bytes) -> str:
    """Explain why a response is not the echo of the sent frame.

    Only used for diagnostics: any response that is not an exact echo is a failed attempt.
    """
    if not received:
        return "no response"
    if len(received) < len(sent):
        return f"short response: {len(received)} of {len(sent)} bytes"
    try:
        frame = CommandFrame.decode(received)
    except CRCError:
        return "corrupt response: CRC mismatch"
    except InvalidFrameError as e:
        return str(e)
    if frame.function_code != sent[1]:
        return f"unexpected function code {frame.function_code:#04x} from address {frame.address}"
    return f"response from unexpected address {frame.address}"
