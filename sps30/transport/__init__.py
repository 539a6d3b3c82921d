"""
Transport layer for SHDLC communication.

This package provides transport implementations for talking to the SPS30
over various physical interfaces.

Available transports:
- SerialTransport: Blocking serial port using pyserial
- MockTransport: Mock transport for testing without hardware
- ScriptedMockTransport: Mock transport checking request/response pairs

Example:
    >>> from sps30.transport import SerialTransport
    >>> with SerialTransport("/dev/ttyUSB0") as transport:
    ...     transport.write(frame_data)
    ...     response = transport.read_until(0x7E)
"""

from sps30.transport.abc import AbstractTransport
from sps30.transport.mock import MockTransport, ScriptedMockTransport
from sps30.transport.serial_port import SerialTransport

__all__ = [
    "AbstractTransport",
    "MockTransport",
    "ScriptedMockTransport",
    "SerialTransport",
]
