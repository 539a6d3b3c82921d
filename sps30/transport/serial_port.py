"""
Serial transport using pyserial.

This module provides the transport implementation for talking to a real
SPS30 over its UART interface.

Serial Configuration (per SPS30 datasheet):
- Baud rate: 115200
- Data bits: 8
- Parity: None
- Stop bits: 1
- Flow control: None

Any pyserial URL is accepted as the port, so "loop://" or
"socket://host:port" work as well as device paths.

Example:
    >>> transport = SerialTransport("/dev/ttyUSB0")
    >>> with transport:
    ...     transport.write(frame)
    ...     response = transport.read_until(0x7E)
"""

from __future__ import annotations

import logging

import serial

from sps30.config import SerialConfig
from sps30.exceptions import TimeoutError, TransportError
from sps30.protocol.constants import ProtocolConstants
from sps30.transport.abc import AbstractTransport

logger = logging.getLogger(__name__)


class SerialTransport(AbstractTransport):
    """
    Blocking serial transport using pyserial.

    Attributes:
        port_name: Serial port path (e.g., "/dev/ttyUSB0", "COM3").
        is_open: Whether the port is currently open.

    Example:
        >>> transport = SerialTransport("/dev/ttyUSB0", timeout=2.0)
        >>> transport.open()
        >>> try:
        ...     transport.write(b"\\x7e\\x00\\xd1\\x00\\x2e\\x7e")
        ...     response = transport.read_until(0x7E)
        ... finally:
        ...     transport.close()
    """

    def __init__(
        self,
        port: str,
        baudrate: int = ProtocolConstants.DEFAULT_BAUD_RATE,
        timeout: float = ProtocolConstants.DEFAULT_RECEIVE_TIMEOUT,
    ) -> None:
        """
        Initialize the serial transport.

        Args:
            port: Serial port path or pyserial URL.
            baudrate: Baud rate (default: 115200).
            timeout: Read timeout in seconds (default: 1.0).
        """
        self._config = SerialConfig(port=port, baudrate=baudrate, timeout=timeout)
        self._serial: serial.SerialBase | None = None

    @classmethod
    def from_config(cls, config: SerialConfig) -> SerialTransport:
        """Create a transport from a SerialConfig."""
        return cls(config.port, baudrate=config.baudrate, timeout=config.timeout)

    @property
    def is_open(self) -> bool:
        """Check if the serial port is currently open."""
        return self._serial is not None and self._serial.is_open

    @property
    def port_name(self) -> str:
        """Get the serial port path."""
        return self._config.port

    @property
    def baudrate(self) -> int:
        """Get the configured baud rate."""
        return self._config.baudrate

    @property
    def timeout(self) -> float:
        """Get the configured read timeout in seconds."""
        return self._config.timeout

    def open(self) -> None:
        """
        Open the serial port.

        Raises:
            TransportError: If the port cannot be opened.
        """
        if self.is_open:
            return

        try:
            self._serial = serial.serial_for_url(
                self._config.port,
                **self._config.to_serial_kwargs(),
            )
        except serial.SerialException as e:
            raise TransportError(f"Failed to open serial port {self.port_name}: {e}") from e
        except (OSError, ValueError) as e:
            raise TransportError(f"Error opening {self.port_name}: {e}") from e

        logger.debug("Opened %s at %d baud", self.port_name, self.baudrate)

    def close(self) -> None:
        """
        Close the serial port.

        Safe to call multiple times.
        """
        if self._serial is not None:
            try:
                self._serial.close()
            except (serial.SerialException, OSError) as e:
                logger.warning("Error closing %s: %s", self.port_name, e)
            logger.debug("Closed %s", self.port_name)
        self._serial = None

    def write(self, data: bytes) -> None:
        """
        Write data to the serial port.

        Args:
            data: Bytes to transmit.

        Raises:
            TransportError: If the port is not open or write fails.
        """
        port = self._require_open()
        try:
            port.write(data)
            port.flush()
        except serial.SerialTimeoutException as e:
            raise TimeoutError("Write timed out", timeout_seconds=self.timeout) from e
        except (serial.SerialException, OSError) as e:
            raise TransportError(f"Write failed: {e}") from e

    def read(self, size: int) -> bytes:
        """
        Read up to `size` bytes from the serial port.

        Raises:
            TimeoutError: If nothing arrived within the timeout.
            TransportError: If the port is not open or read fails.
        """
        if size <= 0:
            return b""

        port = self._require_open()
        try:
            data = port.read(size)
        except (serial.SerialException, OSError) as e:
            raise TransportError(f"Read failed: {e}") from e

        if not data:
            raise TimeoutError(f"Timeout waiting for {size} bytes", timeout_seconds=self.timeout)
        return bytes(data)

    def read_until(self, terminator: int, size: int | None = None) -> bytes:
        """
        Read from the serial port until a terminator byte is received.

        Raises:
            TimeoutError: If nothing arrived within the timeout.
            TransportError: If the port is not open or read fails.
        """
        port = self._require_open()
        try:
            data = port.read_until(bytes([terminator]), size)
        except (serial.SerialException, OSError) as e:
            raise TransportError(f"Read failed: {e}") from e

        if not data:
            raise TimeoutError(
                f"Timeout waiting for terminator 0x{terminator:02X}",
                timeout_seconds=self.timeout,
            )
        return bytes(data)

    def discard_buffers(self) -> None:
        """
        Discard any pending data in input and output buffers.
        """
        if self._serial is not None and self._serial.is_open:
            try:
                self._serial.reset_input_buffer()
                self._serial.reset_output_buffer()
            except (serial.SerialException, OSError) as e:
                logger.debug("Could not reset buffers on %s: %s", self.port_name, e)

    def _require_open(self) -> serial.SerialBase:
        if self._serial is None or not self._serial.is_open:
            raise TransportError("Serial port is not open")
        return self._serial

    def __repr__(self) -> str:
        status = "open" if self.is_open else "closed"
        return f"SerialTransport({self.port_name!r}, baudrate={self.baudrate}, {status})"
