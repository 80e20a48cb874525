"""CRC16 checksum used by PZEM command frames.

This is the checksum of Modbus RTU: initial value 0xFFFF,
reflected polynomial 0xA001 (reverse of 0x8005), low byte transmitted first.
"""

CRC16_INITIAL_VALUE = 0xFFFF
CRC16_POLYNOMIAL = 0xA001


def calculate_crc16(data: bytes) -> bytes:
    r"""Calculate the CRC16 checksum of a byte sequence.

    Args:
        data: Bytes to checksum (address + function code)

    Returns: 2-byte checksum, low byte first. An empty input yields b'\xff\xff'.

    Example:
        >>> calculate_crc16(b'\x01\x42').hex(' ')
        '80 11'

    """
    crc = CRC16_INITIAL_VALUE

    for byte in data:
        crc ^= byte
        for _ in range(8):
            if crc & 0x0001:
                crc = (crc >> 1) ^ CRC16_POLYNOMIAL
            else:
                crc >>= 1

    return crc.to_bytes(2, byteorder="little")


def validate_crc16(frame_with_crc: bytes) -> bool:
    r"""Check that a frame ends with the CRC16 of its preceding bytes.

    Args:
        frame_with_crc: Complete frame, checksum included

    Returns: True if the trailing checksum matches, False otherwise

    Example:
        >>> validate_crc16(b'\x01\x42\x80\x11')
        True

    """
    if len(frame_with_crc) < 3:  # at least 1 byte of data + 2 bytes CRC
        return False

    data, received_crc = frame_with_crc[:-2], frame_with_crc[-2:]
    return calculate_crc16(data) == received_crc
