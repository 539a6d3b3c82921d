"""
SHDLC request frame assembly.

Request frame layout (MOSI)::

    +-------+------+-----+-----+-----------+-----+------+
    | START | ADDR | CMD | LEN |   DATA    | CHK | STOP |
    | 0x7E  |  1   |  1  |  1  | 0..255 B  |  1  | 0x7E |
    +-------+------+-----+-----+-----------+-----+------+

Everything between the markers is byte-stuffed. The checksum covers the
logical ADDR, CMD, LEN and DATA bytes.
"""

from __future__ import annotations

from sps30.exceptions import PayloadTooLargeError
from sps30.protocol.checksums import calculate_checksum, header_sum
from sps30.protocol.constants import ProtocolConstants
from sps30.protocol.stuffing import stuff


def encode_frame(
    address: int,
    command: int,
    payload: bytes | bytearray = b"",
) -> bytes:
    """
    Build a complete SHDLC request frame.

    Args:
        address: Peripheral address (0x00 for the SPS30).
        command: Command byte.
        payload: Request data, at most 255 bytes.

    Returns:
        Stuffed frame bytes including both markers.

    Raises:
        ValueError: If address or command is not a single byte.
        PayloadTooLargeError: If the payload or the stuffed frame exceeds
            the protocol limits.

    Example:
        >>> encode_frame(0x00, 0x00, b"\\x01\\x03").hex()
        '7e0000020103f97e'
    """
    if not 0 <= address <= 0xFF:
        raise ValueError(f"Address must be 0-255, got {address}")
    if not 0 <= command <= 0xFF:
        raise ValueError(f"Command must be 0-255, got {command}")

    length = len(payload)
    if length > ProtocolConstants.MAX_PAYLOAD_LENGTH:
        raise PayloadTooLargeError(length, ProtocolConstants.MAX_PAYLOAD_LENGTH)

    checksum = calculate_checksum(header_sum(address, command), length, payload)

    frame = bytearray([ProtocolConstants.START])
    frame += stuff(bytes([address, command, length]))
    frame += stuff(payload)
    frame += stuff(bytes([checksum]))
    frame.append(ProtocolConstants.STOP)

    if len(frame) > ProtocolConstants.MAX_TX_FRAME_SIZE:
        raise PayloadTooLargeError(
            len(frame), ProtocolConstants.MAX_TX_FRAME_SIZE, what="stuffed frame"
        )
    return bytes(frame)
