"""
sps30 - Python library for the Sensirion SPS30 particulate matter sensor.

This library talks to the SPS30 over its UART interface using the SHDLC
framing protocol: wake the sensor, read its version, start measuring and
read mass and number concentrations.

Example:
    >>> from sps30 import SPS30Client
    >>> from sps30.transport import SerialTransport
    >>>
    >>> with SPS30Client(SerialTransport("/dev/ttyUSB0")) as sensor:
    ...     sensor.wakeup()
    ...     sensor.start_measurement()
    ...     print(sensor.read_measurement().mc_2p5)
"""

__version__ = "0.1.0"

from sps30.client import SPS30Client
from sps30.config import SerialConfig
from sps30.exceptions import (
    ChecksumError,
    DeviceError,
    FrameError,
    ParseError,
    PayloadTooLargeError,
    ProtocolError,
    SPS30Error,
    TimeoutError,
    TransportError,
    UnexpectedResponseLengthError,
)
from sps30.models.records import DeviceStatus, Measurement, VersionInfo
from sps30.transport import AbstractTransport, SerialTransport

__all__ = [
    # Client
    "SPS30Client",
    "SerialConfig",
    # Models
    "VersionInfo",
    "Measurement",
    "DeviceStatus",
    # Exceptions
    "SPS30Error",
    "TransportError",
    "TimeoutError",
    "PayloadTooLargeError",
    "ProtocolError",
    "FrameError",
    "ChecksumError",
    "UnexpectedResponseLengthError",
    "DeviceError",
    "ParseError",
    # Transport
    "AbstractTransport",
    "SerialTransport",
]
