"""
SHDLC 8-bit checksum calculation and validation.

The checksum is the bitwise complement of the low byte of the sum of all
logical (unstuffed) header and payload bytes:

    CHK = ~(ADDR + CMD [+ STATE] + LEN + sum(DATA)) & 0xFF

Request frames have no STATE byte; response frames include it in the sum.
The checksum is computed before byte stuffing and is itself stuffed on the
wire.
"""

from __future__ import annotations


def header_sum(*fields: int) -> int:
    """
    Sum header bytes modulo 256.

    Example:
        >>> header_sum(0x00, 0xD1, 0x00)
        209
    """
    return sum(fields) & 0xFF


def calculate_checksum(
    header_sum: int,
    declared_length: int,
    payload: bytes | bytearray | memoryview = b"",
) -> int:
    """
    Calculate the SHDLC checksum.

    Args:
        header_sum: ADDR + CMD on transmit, ADDR + CMD + STATE on receive.
        declared_length: Value of the LEN field.
        payload: Logical payload bytes.

    Returns:
        8-bit checksum value (0-255).

    Example:
        >>> calculate_checksum(0x00 + 0x00, 2, b"\\x01\\x03")
        249
    """
    # Only the low byte survives, so masking once at the end is enough
    return ~(header_sum + declared_length + sum(payload)) & 0xFF


def validate_checksum(
    header_sum: int,
    declared_length: int,
    payload: bytes | bytearray | memoryview,
    received: int,
) -> bool:
    """
    Check a received checksum against the calculated value.

    Returns:
        True if checksum is valid, False otherwise.
    """
    return calculate_checksum(header_sum, declared_length, payload) == received
