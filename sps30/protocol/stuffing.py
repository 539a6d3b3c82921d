"""
SHDLC byte stuffing.

The frame markers use 0x7E, so any reserved value inside a frame is replaced
by the escape byte 0x7D followed by the value XOR 0x20:

    0x7E -> 0x7D 0x5E
    0x7D -> 0x7D 0x5D
    0x11 -> 0x7D 0x31   (XON)
    0x13 -> 0x7D 0x33   (XOFF)
"""

from __future__ import annotations

from sps30.exceptions import TruncatedFrameError
from sps30.protocol.constants import ProtocolConstants

_ESCAPE = ProtocolConstants.ESCAPE
_ESCAPE_XOR = ProtocolConstants.ESCAPE_XOR
_RESERVED = ProtocolConstants.RESERVED_BYTES


def stuff(data: bytes | bytearray | memoryview) -> bytes:
    """
    Escape reserved byte values.

    Args:
        data: Logical bytes.

    Returns:
        Stuffed bytes, never shorter than the input.

    Example:
        >>> stuff(b"\\x01\\x7e").hex()
        '017d5e'
    """
    out = bytearray()
    for byte in data:
        if byte in _RESERVED:
            out.append(_ESCAPE)
            out.append(byte ^ _ESCAPE_XOR)
        else:
            out.append(byte)
    return bytes(out)


def destuff_byte(buffer: bytes | bytearray | memoryview, index: int) -> tuple[int, int]:
    """
    Read one logical byte from a stuffed buffer.

    Args:
        buffer: Stuffed bytes.
        index: Position of the next unread byte.

    Returns:
        Tuple of (logical byte, index of the following byte).

    Raises:
        TruncatedFrameError: If index is past the end of the buffer or the
            escape byte is the last byte of the buffer.

    Example:
        >>> destuff_byte(b"\\x7d\\x31\\x03", 0)
        (17, 2)
    """
    if index >= len(buffer):
        raise TruncatedFrameError(f"Frame ended at offset {index}")

    byte = buffer[index]
    if byte != _ESCAPE:
        return byte, index + 1

    if index + 1 >= len(buffer):
        raise TruncatedFrameError(f"Escape byte at offset {index} has no following byte")
    return buffer[index + 1] ^ _ESCAPE_XOR, index + 2


def destuff(buffer: bytes | bytearray | memoryview) -> bytes:
    """
    Reverse stuff() over a whole buffer.

    Raises:
        TruncatedFrameError: If the buffer ends with a dangling escape byte.
    """
    out = bytearray()
    index = 0
    while index < len(buffer):
        byte, index = destuff_byte(buffer, index)
        out.append(byte)
    return bytes(out)
