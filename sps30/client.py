"""
SPS30 sensor client.

This module provides the main client interface for talking to a Sensirion
SPS30 particulate matter sensor over its SHDLC/UART interface.

Every operation is a single round trip: encode a request frame, write it,
read one response frame and decode it into a typed record. The device's
idle/measuring/sleep mode is not tracked by the client.

Example:
    >>> from sps30 import SPS30Client
    >>> from sps30.transport import SerialTransport
    >>>
    >>> with SPS30Client(SerialTransport("/dev/ttyUSB0")) as sensor:
    ...     sensor.wakeup()
    ...     print(sensor.read_version())
    ...     sensor.start_measurement()
    ...     print(sensor.read_measurement())
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sps30.exceptions import (
    UnexpectedResponseLengthError,
    describe_status,
    raise_for_status,
)
from sps30.models.records import DeviceStatus, Measurement, VersionInfo
from sps30.protocol.constants import (
    COMMANDS,
    CommandCode,
    CommandDescriptor,
    ProtocolConstants,
)
from sps30.protocol.frame_reader import FrameReader, ShdlcFrame
from sps30.protocol.frame_writer import encode_frame

if TYPE_CHECKING:
    from types import TracebackType

    from sps30.transport.abc import AbstractTransport

# Module logger
logger = logging.getLogger(__name__)

# State byte the sensor answers WAKE_UP with when it is already awake
_STATUS_NOT_ALLOWED = 0x43


class SPS30Client:
    """
    Client for the Sensirion SPS30 particulate matter sensor.

    The client owns its transport: entering the client as a context manager
    opens the transport and leaving it closes the transport again. Calls are
    not synchronized; share one client between threads only with external
    locking.

    Attributes:
        transport: The underlying transport layer.
        address: SHDLC slave address (always 0 for the SPS30).

    Example:
        >>> client = SPS30Client(MockTransport())
        >>> with client:
        ...     client.start_measurement()
    """

    def __init__(
        self,
        transport: AbstractTransport,
        address: int = ProtocolConstants.PERIPHERAL_ADDRESS,
    ) -> None:
        """
        Initialize the sensor client.

        Args:
            transport: Transport layer for communication.
            address: SHDLC slave address of the sensor.
        """
        self._transport = transport
        self._address = address
        self._frame_reader = FrameReader()

    @property
    def transport(self) -> AbstractTransport:
        """Get the underlying transport."""
        return self._transport

    @property
    def address(self) -> int:
        """Get the SHDLC slave address."""
        return self._address

    def open(self) -> None:
        """Open the transport if it is not open yet."""
        if not self._transport.is_open:
            logger.debug("Opening transport %s", self._transport.port_name)
            self._transport.open()

    def close(self) -> None:
        """Close the transport."""
        self._transport.close()

    # ========== Raw Round Trip ==========

    def transceive(
        self,
        command: int,
        payload: bytes = b"",
        max_response_length: int = ProtocolConstants.MAX_PAYLOAD_LENGTH,
    ) -> ShdlcFrame:
        """
        Send one request frame and read back one response frame.

        The response status is not checked here; callers decide how to treat
        a non-zero state byte.

        Args:
            command: Command code.
            payload: Request payload (at most 255 bytes).
            max_response_length: Largest response payload to accept.

        Returns:
            The decoded response frame.

        Raises:
            PayloadTooLargeError: If the request does not fit in a frame.
            TransportError: On I/O failure or timeout.
            ProtocolError: If the response frame is malformed.
        """
        request = encode_frame(self._address, command, payload)
        logger.debug("TX [0x%02X]: %s", command, request.hex(" "))
        self._transport.write(request)

        raw = self._receive_frame()
        logger.debug("RX [0x%02X]: %s", command, raw.hex(" "))

        return self._frame_reader.parse(raw, max_response_length)

    def _receive_frame(self) -> bytes:
        """
        Read one raw frame from the transport.

        The first read_until() stops right after the START marker, the
        second one collects the rest of the frame through the STOP marker.
        Stuffing guarantees no unescaped 0x7E appears in between.
        """
        marker = ProtocolConstants.STOP
        data = self._transport.read_until(marker, ProtocolConstants.MAX_RX_FRAME_SIZE)
        if data == bytes([ProtocolConstants.START]):
            data += self._transport.read_until(
                marker, ProtocolConstants.MAX_RX_FRAME_SIZE - len(data)
            )
        return data

    def _execute(self, command: CommandCode, payload: bytes | None = None) -> ShdlcFrame:
        """Run a table-driven command and check the response length."""
        descriptor = COMMANDS[command]
        request = descriptor.subcommand if payload is None else payload
        frame = self.transceive(command, request)
        self._check_length(frame, descriptor)
        return frame

    def _check_length(self, frame: ShdlcFrame, descriptor: CommandDescriptor) -> None:
        expected = descriptor.expected_response_length
        received = frame.header.declared_length
        if received == expected:
            return

        # Error replies carry no payload, so the state byte explains the mismatch
        if frame.status != 0:
            self._raise_device_error(frame)

        raise UnexpectedResponseLengthError(descriptor.command_code, expected, received)

    def _raise_device_error(self, frame: ShdlcFrame, record: object = None) -> None:
        logger.error(
            "Command 0x%02X failed with status 0x%02X: %s",
            frame.header.command,
            frame.status,
            describe_status(frame.status),
        )
        raise_for_status(frame.status, command=frame.header.command, record=record)

    def _execute_simple(self, command: CommandCode) -> None:
        frame = self._execute(command)
        if frame.is_error:
            self._raise_device_error(frame)

    # ========== Sensor Operations ==========

    def wakeup(self) -> None:
        """
        Switch the sensor from sleep mode to idle mode.

        Writes a raw 0xFF byte to wake the UART, then the WAKE_UP frame. A
        sensor that is already awake rejects WAKE_UP with state 0x43; that
        reply is accepted.

        Raises:
            DeviceError: If the sensor reports any other error.
        """
        logger.debug("Waking up sensor")
        self._transport.write(bytes([ProtocolConstants.WAKE_BYTE]))

        frame = self._execute(CommandCode.WAKE_UP)
        if frame.status == _STATUS_NOT_ALLOWED:
            logger.warning("Wake-up not allowed in current state, sensor is already awake")
            return
        if frame.is_error:
            self._raise_device_error(frame)

    def read_version(self) -> VersionInfo:
        """
        Read firmware, hardware and protocol versions.

        Returns:
            Decoded version information.

        Raises:
            DeviceError: If the sensor reports an error.
            UnexpectedResponseLengthError: If the reply is not 7 bytes.
        """
        logger.debug("Reading version info")
        frame = self._execute(CommandCode.READ_VERSION)
        if frame.is_error:
            self._raise_device_error(frame)

        version = VersionInfo.from_payload(frame.payload)
        logger.debug("Version: %s", version)
        return version

    def start_measurement(self) -> None:
        """
        Start measuring with big-endian float output.

        Raises:
            DeviceError: If the sensor reports an error, e.g. 0x43 when it
                is already measuring.
        """
        logger.debug("Starting measurement")
        self._execute_simple(CommandCode.START_MEASUREMENT)

    def stop_measurement(self) -> None:
        """Return the sensor to idle mode."""
        logger.debug("Stopping measurement")
        self._execute_simple(CommandCode.STOP_MEASUREMENT)

    def read_measurement(self) -> Measurement:
        """
        Read the latest measured values.

        The payload is decoded before the state byte is checked, so a
        DeviceError raised here still carries the values in its record
        attribute.

        Returns:
            Mass and number concentrations and typical particle size.

        Raises:
            DeviceError: If the sensor reports an error.
            UnexpectedResponseLengthError: If the reply is not 40 bytes.
        """
        frame = self._execute(CommandCode.READ_MEASUREMENT)
        measurement = Measurement.from_payload(frame.payload)

        if frame.is_error:
            self._raise_device_error(frame, record=measurement)

        logger.debug("Measurement: %s", measurement)
        return measurement

    def sleep(self) -> None:
        """Enter sleep mode. Only allowed from idle mode."""
        logger.debug("Entering sleep mode")
        self._execute_simple(CommandCode.SLEEP)

    def start_fan_cleaning(self) -> None:
        """Start a manual fan cleaning cycle. Only allowed while measuring."""
        logger.debug("Starting fan cleaning")
        self._execute_simple(CommandCode.START_FAN_CLEANING)

    def read_device_status(self, clear: bool = False) -> DeviceStatus:
        """
        Read the device status register.

        Args:
            clear: Clear the register after reading it.

        Returns:
            Decoded status flags.
        """
        logger.debug("Reading device status (clear=%s)", clear)
        frame = self._execute(CommandCode.READ_DEVICE_STATUS, bytes([1 if clear else 0]))
        if frame.is_error:
            self._raise_device_error(frame)

        status = DeviceStatus.from_payload(frame.payload)
        if status.has_errors:
            logger.warning("Sensor status reports errors: %r", status)
        return status

    def reset(self) -> None:
        """Soft reset the sensor."""
        logger.debug("Resetting sensor")
        self._execute_simple(CommandCode.DEVICE_RESET)

    # ========== Context Manager ==========

    def __enter__(self) -> SPS30Client:
        """Context manager entry - opens the transport."""
        self.open()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Context manager exit - closes the transport."""
        self.close()

    def __repr__(self) -> str:
        return f"SPS30Client(transport={self._transport!r}, address={self._address})"
