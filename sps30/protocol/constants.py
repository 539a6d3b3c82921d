"""
SHDLC command codes and protocol constants for the SPS30.

Values follow the Sensirion SPS30 datasheet, UART interface section.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Final


class CommandCode(IntEnum):
    """
    SHDLC command codes understood by the SPS30.

    The same code is echoed back in the CMD field of the response frame.
    """

    START_MEASUREMENT = 0x00
    """Enter measurement mode (subcommand 0x01, output format 0x03 = float)."""

    STOP_MEASUREMENT = 0x01
    """Return to idle mode."""

    READ_MEASUREMENT = 0x03
    """Read the latest measured values (40 bytes of big-endian floats)."""

    SLEEP = 0x10
    """Enter sleep mode."""

    WAKE_UP = 0x11
    """Leave sleep mode (must be preceded by a raw 0xFF byte on UART)."""

    START_FAN_CLEANING = 0x56
    """Run the fan at full speed for the cleaning interval."""

    READ_VERSION = 0xD1
    """Read firmware, hardware and SHDLC protocol versions."""

    READ_DEVICE_STATUS = 0xD2
    """Read (and optionally clear) the device status register."""

    DEVICE_RESET = 0xD3
    """Soft reset."""


class ProtocolConstants:
    """
    SHDLC protocol constants.

    Contains frame markers, byte stuffing values, frame capacities and
    serial defaults used throughout the protocol implementation.
    """

    # ===== Frame Markers =====

    START: Final[int] = 0x7E
    """Start of frame marker (never stuffed)."""

    STOP: Final[int] = 0x7E
    """End of frame marker (never stuffed)."""

    # ===== Byte Stuffing =====

    ESCAPE: Final[int] = 0x7D
    """Escape byte that precedes a transposed reserved value."""

    ESCAPE_XOR: Final[int] = 0x20
    """Reserved bytes are sent as ESCAPE, byte ^ ESCAPE_XOR."""

    RESERVED_BYTES: Final[frozenset[int]] = frozenset({0x11, 0x13, 0x7D, 0x7E})
    """Byte values that must be escaped inside a frame."""

    # ===== Frame Capacities =====

    HEADER_SIZE_TX: Final[int] = 4
    """ADDR, CMD, LEN and CHK on a request frame."""

    HEADER_SIZE_RX: Final[int] = 5
    """ADDR, CMD, STATE, LEN and CHK on a response frame."""

    MAX_PAYLOAD_LENGTH: Final[int] = 255
    """LEN is a single byte."""

    MAX_TX_FRAME_SIZE: Final[int] = 2 + 2 * (HEADER_SIZE_TX + MAX_PAYLOAD_LENGTH)
    """Markers plus worst-case stuffed header and payload on transmit."""

    MAX_RX_FRAME_SIZE: Final[int] = 2 + 2 * (HEADER_SIZE_RX + MAX_PAYLOAD_LENGTH)
    """Markers plus worst-case stuffed header and payload on receive."""

    MIN_FRAME_SIZE: Final[int] = 7
    """START, ADDR, CMD, STATE, LEN, CHK, STOP with an empty payload."""

    # ===== Device =====

    PERIPHERAL_ADDRESS: Final[int] = 0x00
    """The SPS30 always answers on address 0."""

    WAKE_BYTE: Final[int] = 0xFF
    """Raw byte that wakes the UART interface before the WAKE_UP frame."""

    MEASUREMENT_FORMAT_FLOAT: Final[int] = 0x03
    """Output format for START_MEASUREMENT: big-endian IEEE-754 floats."""

    # ===== Serial Port Configuration =====

    DEFAULT_BAUD_RATE: Final[int] = 115200
    """The SPS30 UART runs at a fixed 115200 baud, 8N1."""

    DEFAULT_RECEIVE_TIMEOUT: Final[float] = 1.0
    """Default read timeout in seconds."""


@dataclass(frozen=True)
class CommandDescriptor:
    """
    Static description of one sensor operation.

    Attributes:
        command_code: Command byte placed in the CMD field.
        expected_response_length: Payload length the device answers with.
        subcommand: Fixed request payload, empty for most commands.
    """

    command_code: CommandCode
    expected_response_length: int
    subcommand: bytes = b""


COMMANDS: Final[dict[CommandCode, CommandDescriptor]] = {
    CommandCode.START_MEASUREMENT: CommandDescriptor(
        CommandCode.START_MEASUREMENT,
        0,
        bytes([0x01, ProtocolConstants.MEASUREMENT_FORMAT_FLOAT]),
    ),
    CommandCode.STOP_MEASUREMENT: CommandDescriptor(CommandCode.STOP_MEASUREMENT, 0),
    CommandCode.READ_MEASUREMENT: CommandDescriptor(CommandCode.READ_MEASUREMENT, 40),
    CommandCode.SLEEP: CommandDescriptor(CommandCode.SLEEP, 0),
    CommandCode.WAKE_UP: CommandDescriptor(CommandCode.WAKE_UP, 0),
    CommandCode.START_FAN_CLEANING: CommandDescriptor(CommandCode.START_FAN_CLEANING, 0),
    CommandCode.READ_VERSION: CommandDescriptor(CommandCode.READ_VERSION, 7),
    CommandCode.READ_DEVICE_STATUS: CommandDescriptor(CommandCode.READ_DEVICE_STATUS, 5),
    CommandCode.DEVICE_RESET: CommandDescriptor(CommandCode.DEVICE_RESET, 0),
}
"""Command descriptor table, one entry per supported operation."""
