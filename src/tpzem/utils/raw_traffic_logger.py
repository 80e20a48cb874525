"""Raw traffic logger.

Every byte written to or read from the serial line is dumped in hex on the
`tpzem.raw_traffic` logger. The meters acknowledge a raw command by echoing it,
so a received block that is not the echo of the last written frame is marked `[!]`.
"""

from logging import getLogger
from typing import Literal

raw_traffic_logger = getLogger("tpzem.raw_traffic")

MISMATCH_MARKER = "[!]"


def log_raw_traffic(
    transport_name: str,
    direction: Literal["sent", "recv"],
    data: bytes,
    *,
    is_error: bool = False,
) -> None:
    """Log bytes written to or read from the serial line."""
    raw_traffic_logger.debug(
        "%6s %s: %s %s",
        transport_name,
        direction,
        format_bytes(data),
        MISMATCH_MARKER if is_error else "",
    )


def log_response(transport_name: str, sent: bytes, received: bytes) -> bool:
    """Log a received block and mark it unless it echoes `sent` byte for byte.

    A short read, an error frame or a reply from another address are all marked.

    Returns:
        True if `received` is the echo of `sent`

    """
    is_echo = received == sent
    log_raw_traffic(transport_name, "recv", received, is_error=not is_echo)
    return is_echo


def format_bytes(data: bytes) -> str:
    """Format bytes as space separated upper-case hex, e.g. '01 42 80 11'."""
    return data.hex(" ").upper()
