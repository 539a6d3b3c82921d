"""
Exception hierarchy for sps30.

All exceptions inherit from SPS30Error, so callers can catch every driver
error with a single except clause. The hierarchy separates:

1. Transport failures (the serial link itself misbehaved)
2. Malformed frames and checksum failures (the bytes arrived but are wrong)
3. Device-reported failures (the sensor understood us and said no)
4. Caller mistakes detected before anything is sent (payload too large)
"""

from __future__ import annotations

from typing import Any, Final


class SPS30Error(Exception):
    """
    Base exception for all sps30 errors.

    All library-specific exceptions inherit from this class, allowing
    callers to catch all driver errors with a single except clause.
    """

    pass


class TransportError(SPS30Error):
    """
    Transport-level error.

    Raised for low-level transport issues:
    - Serial port cannot be opened
    - Read or write on the port failed
    - Operation attempted on a closed transport
    """

    pass


class TimeoutError(TransportError):  # noqa: A001 - intentionally shadows builtin
    """
    No data arrived from the sensor within the transport timeout.
    """

    def __init__(
        self,
        message: str = "Communication timeout",
        *,
        timeout_seconds: float | None = None,
    ) -> None:
        super().__init__(message)
        self.timeout_seconds = timeout_seconds

    def __str__(self) -> str:
        base = super().__str__()
        if self.timeout_seconds is not None:
            return f"{base} (after {self.timeout_seconds:.1f}s)"
        return base


class PayloadTooLargeError(SPS30Error, ValueError):
    """
    Request payload does not fit in a single SHDLC frame.

    Raised while encoding, before any byte is written to the transport.
    """

    def __init__(self, length: int, limit: int, what: str = "payload") -> None:
        self.length = length
        self.limit = limit
        super().__init__(f"{what} of {length} bytes exceeds limit of {limit} bytes")


class ProtocolError(SPS30Error):
    """
    Protocol-level error.

    Raised when a received frame violates the SHDLC framing rules or does not
    match what the issued command expects.
    """

    pass


class FrameError(ProtocolError):
    """
    Malformed frame.

    Base class for structural decode failures. The offending raw bytes are
    kept on the exception for diagnostics.
    """

    def __init__(self, message: str, *, raw_frame: bytes | None = None) -> None:
        super().__init__(message)
        self.raw_frame = raw_frame


class FrameTooShortError(FrameError):
    """Fewer bytes were received than the smallest valid frame."""


class MissingStartMarkerError(FrameError):
    """The first received byte is not the 0x7E start marker."""


class MissingStopMarkerError(FrameError):
    """The byte after the checksum is not the 0x7E stop marker."""


class TruncatedFrameError(FrameError):
    """The frame ended in the middle of a field or an escape sequence."""


class IncompleteResponseError(FrameError):
    """The frame holds fewer payload bytes than its header declares."""


class ChecksumError(ProtocolError):
    """
    Checksum validation failure.

    Raised when a received frame's checksum doesn't match the calculated value.
    This typically indicates data corruption during transmission.
    """

    def __init__(
        self,
        message: str = "Checksum validation failed",
        *,
        expected: int | None = None,
        received: int | None = None,
    ) -> None:
        super().__init__(message)
        self.expected = expected
        self.received = received

    def __str__(self) -> str:
        base = super().__str__()
        if self.expected is not None and self.received is not None:
            return f"{base} (expected 0x{self.expected:02X}, got 0x{self.received:02X})"
        return base


class UnexpectedResponseLengthError(ProtocolError):
    """
    The declared payload length differs from what the command returns.
    """

    def __init__(self, command: int, expected: int, received: int) -> None:
        self.command = command
        self.expected = expected
        self.received = received
        super().__init__(
            f"Command 0x{command:02X}: expected {expected} response bytes, "
            f"device declared {received}"
        )


class ParseError(SPS30Error):
    """
    Record parsing error.

    Raised when a payload cannot be decoded into a record, typically because
    its size does not match the record layout.
    """

    def __init__(
        self,
        message: str,
        *,
        record_type: str | None = None,
        raw_data: bytes | None = None,
    ) -> None:
        super().__init__(message)
        self.record_type = record_type
        self.raw_data = raw_data

    def __str__(self) -> str:
        parts = [super().__str__()]
        if self.record_type:
            parts.append(f"record_type={self.record_type}")
        if self.raw_data:
            parts.append(f"data={self.raw_data.hex()}")
        return " ".join(parts)


class DeviceError(SPS30Error):
    """
    Error status reported by the sensor.

    The status attribute contains the original SHDLC state byte; reason is
    the human-readable text from the device error table. When the device
    still delivered a full payload, the decoded record is kept in record.
    """

    def __init__(
        self,
        status: int,
        *,
        command: int | None = None,
        record: Any = None,
    ) -> None:
        self.status = status
        self.command = command
        self.record = record
        self.reason = describe_status(status)
        if command is None:
            message = f"Device error {status}: {self.reason}"
        else:
            message = f"Device error {status} on command 0x{command:02X}: {self.reason}"
        super().__init__(message)


# SHDLC state byte to message mapping from the SPS30 datasheet
DEVICE_ERROR_MESSAGES: Final[dict[int, str]] = {
    0x01: "Wrong data length for this command (too much or little data)",
    0x02: "Unknown command",
    0x03: "No access right for command",
    0x04: "Illegal command parameter or parameter out of allowed range",
    0x28: "Internal function argument out of range",
    0x43: "Command not allowed in current state",
}

UNKNOWN_DEVICE_ERROR: Final[str] = "Unknown device error"


def describe_status(status: int) -> str:
    """
    Look up the reason text for a device state byte.

    Args:
        status: State byte from a response header.

    Returns:
        Reason text, "OK" for zero, or a generic message for codes
        outside the table.
    """
    if status == 0:
        return "OK"
    return DEVICE_ERROR_MESSAGES.get(status, UNKNOWN_DEVICE_ERROR)


def raise_for_status(status: int, *, command: int | None = None, record: Any = None) -> None:
    """
    Raise DeviceError if the state byte reports a failure.

    Args:
        status: State byte from a response header.
        command: Command code the response belongs to.
        record: Decoded record to attach to the error, if any.

    Raises:
        DeviceError: If status is non-zero.
    """
    if status != 0:
        raise DeviceError(status, command=command, record=record)
