"""Tests for tpzem/frame.py ."""

import pytest
from tpzem.exceptions import CRCError, InvalidFrameError
from tpzem.frame import (
    RESET_FRAME_LENGTH,
    RESET_FUNCTION_CODE,
    CommandFrame,
    build_reset_frame,
    describe_response,
)
from tpzem.utils.crc import calculate_crc16


def test_reset_frame_address_1() -> None:
    """Test the reset frame of the default address against the known bytes."""
    frame = build_reset_frame(1)
    assert frame.bytes == b"\x01\x42\x80\x11"
    assert frame.crc == b"\x80\x11"
    assert frame.hex() == "01 42 80 11"


@pytest.mark.parametrize("address", range(256))
def test_reset_frame_all_addresses(address: int) -> None:
    """Test frame layout and checksum for every address."""
    data = build_reset_frame(address).bytes
    assert len(data) == RESET_FRAME_LENGTH
    assert data[0] == address
    assert data[1] == RESET_FUNCTION_CODE
    assert data[2:] == calculate_crc16(data[:2])


@pytest.mark.parametrize("address", [-1, 256, 1000])
def test_reset_frame_invalid_address(address: int) -> None:
    """Test that an address outside 0-255 is rejected."""
    with pytest.raises(ValueError, match="Address must be in range 0-255"):
        build_reset_frame(address)


def test_invalid_function_code() -> None:
    """Test that a function code outside 0-255 is rejected."""
    with pytest.raises(ValueError, match="Function code must be in range 0-255"):
        CommandFrame(address=1, function_code=0x100)


def test_decode() -> None:
    """Test decoding of a valid frame."""
    frame = CommandFrame.decode(b"\x01\x42\x80\x11")
    assert frame == build_reset_frame(1)


def test_decode_wrong_length() -> None:
    """Test that decoding rejects data that is not 4 bytes long."""
    with pytest.raises(InvalidFrameError, match=r"Expected a frame of 4 bytes, received 2") as exc_info:
        CommandFrame.decode(b"\x01\x42")
    assert exc_info.value.response_bytes == b"\x01\x42"


def test_decode_crc_error() -> None:
    """Test that decoding rejects a frame with a bad checksum."""
    with pytest.raises(CRCError, match="CRC mismatch in frame 01 42 00 00"):
        CommandFrame.decode(b"\x01\x42\x00\x00")


def test_describe_response() -> None:
    """Test the diagnosis of responses that are not an echo."""
    sent = build_reset_frame(1).bytes

    assert describe_response(sent, b"") == "no response"
    assert describe_response(sent, b"\x01\x42") == "short response: 2 of 4 bytes"
    assert describe_response(sent, b"\x01\x42\x00\x00") == "corrupt response: CRC mismatch"

    error_reply = CommandFrame(address=1, function_code=0xC2).bytes
    assert describe_response(sent, error_reply) == "unexpected function code 0xc2 from address 1"

    other_meter = build_reset_frame(2).bytes
    assert describe_response(sent, other_meter) == "response from unexpected address 2"
