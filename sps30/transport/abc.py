"""
Abstract transport interface for SHDLC communication.

This module defines the abstract base class for all transport implementations.
Transports handle the low-level communication with the sensor over a serial
port or a test double.

The transport layer is responsible for:
- Opening/closing the physical connection
- Reading and writing raw bytes
- Timeout handling
- Buffer management

It knows nothing about SHDLC framing; the client hands it complete frames
and asks for bytes back.

Implementations:
- SerialTransport: pyserial based serial port
- MockTransport / ScriptedMockTransport: for testing without hardware
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from types import TracebackType


class AbstractTransport(ABC):
    """
    Abstract base class for SHDLC transports.

    Transports provide blocking read/write operations. All transport
    implementations must inherit from this class and implement all abstract
    methods.

    Transports support the context manager protocol for safe resource
    management:

        with SerialTransport("/dev/ttyUSB0") as transport:
            transport.write(frame)
            response = transport.read_until(0x7E)

    Attributes:
        is_open: Whether the transport connection is currently open.
        port_name: Identifier for the transport (e.g., serial port name).
    """

    @property
    @abstractmethod
    def is_open(self) -> bool:
        """
        Check if the transport connection is currently open.

        Returns:
            True if connected and ready for I/O, False otherwise.
        """
        ...

    @property
    @abstractmethod
    def port_name(self) -> str:
        """
        Get the transport identifier.

        Returns:
            Port name or identifier string (e.g., "/dev/ttyUSB0", "COM3").
        """
        ...

    @abstractmethod
    def open(self) -> None:
        """
        Open the transport connection.

        Raises:
            TransportError: If the connection cannot be established.
        """
        ...

    @abstractmethod
    def close(self) -> None:
        """
        Close the transport connection.

        Releases the physical connection and any associated resources.
        Safe to call multiple times (idempotent).
        """
        ...

    @abstractmethod
    def write(self, data: bytes) -> None:
        """
        Write data to the transport.

        Args:
            data: Bytes to send.

        Raises:
            TransportError: If the transport is not open or write fails.
        """
        ...

    @abstractmethod
    def read(self, size: int) -> bytes:
        """
        Read up to `size` bytes.

        Blocks until `size` bytes have arrived or the transport timeout
        expires; on timeout the bytes received so far are returned.

        Args:
            size: Maximum number of bytes to read.

        Returns:
            Between 1 and `size` bytes.

        Raises:
            TimeoutError: If no byte at all arrived before the timeout.
            TransportError: If the transport is not open or read fails.
        """
        ...

    @abstractmethod
    def read_until(self, terminator: int, size: int | None = None) -> bytes:
        """
        Read until a terminator byte is received.

        The terminator is included in the returned data. Reading also stops
        after `size` bytes or when the timeout expires, in which case the
        data may lack the terminator.

        Args:
            terminator: Byte value to read until.
            size: Maximum number of bytes to read, None for no limit.

        Returns:
            Bytes read, terminator included if it arrived.

        Raises:
            TimeoutError: If no byte at all arrived before the timeout.
            TransportError: If the transport is not open or read fails.
        """
        ...

    @abstractmethod
    def discard_buffers(self) -> None:
        """
        Discard any pending data in input and output buffers.

        Useful for resynchronizing after a corrupt frame.
        """
        ...

    def __enter__(self) -> AbstractTransport:
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
