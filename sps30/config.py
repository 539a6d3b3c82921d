"""
Serial port configuration.

The SPS30 UART is fixed at 115200 baud, 8 data bits, no parity, 1 stop bit
and no flow control, so only the port, baud rate and read timeout are
configurable.
"""

from __future__ import annotations

from typing import Any

import serial
from pydantic import BaseModel, ConfigDict, Field

from sps30.protocol.constants import ProtocolConstants


class SerialConfig(BaseModel):
    """
    Settings for opening the sensor's serial port.

    Example:
        >>> config = SerialConfig(port="/dev/ttyUSB0")
        >>> config.baudrate
        115200
    """

    model_config = ConfigDict(frozen=True)

    port: str = Field(min_length=1, description="Serial port path, e.g. /dev/ttyUSB0 or COM3")
    baudrate: int = Field(default=ProtocolConstants.DEFAULT_BAUD_RATE, gt=0)
    timeout: float = Field(
        default=ProtocolConstants.DEFAULT_RECEIVE_TIMEOUT,
        gt=0,
        description="Read timeout in seconds",
    )

    def to_serial_kwargs(self) -> dict[str, Any]:
        """Keyword arguments for serial.Serial / serial.serial_for_url."""
        return {
            "baudrate": self.baudrate,
            "bytesize": serial.EIGHTBITS,
            "parity": serial.PARITY_NONE,
            "stopbits": serial.STOPBITS_ONE,
            "timeout": self.timeout,
            "write_timeout": self.timeout,
            "xonxoff": False,
            "rtscts": False,
            "dsrdtr": False,
        }
