"""Tests for the exception hierarchy."""

import pytest

from sps30.exceptions import (
    DEVICE_ERROR_MESSAGES,
    ChecksumError,
    DeviceError,
    FrameError,
    IncompleteResponseError,
    PayloadTooLargeError,
    ProtocolError,
    SPS30Error,
    TimeoutError,
    TransportError,
    UnexpectedResponseLengthError,
    describe_status,
    raise_for_status,
)


class TestDescribeStatus:
    """Tests for the device error table."""

    @pytest.mark.parametrize("status", [0x01, 0x02, 0x03, 0x04, 0x28, 0x43])
    def test_known_codes(self, status):
        assert describe_status(status) == DEVICE_ERROR_MESSAGES[status]

    def test_ok(self):
        assert describe_status(0) == "OK"

    def test_unknown_code(self):
        assert describe_status(0x99) == "Unknown device error"


class TestDeviceError:
    """Tests for DeviceError."""

    def test_attributes(self):
        error = DeviceError(0x43, command=0x00)
        assert error.status == 0x43
        assert error.command == 0x00
        assert error.reason == "Command not allowed in current state"
        assert error.record is None
        assert "0x00" in str(error)

    def test_without_command(self):
        assert str(DeviceError(0x02)) == "Device error 2: Unknown command"

    def test_raise_for_status(self):
        raise_for_status(0)
        with pytest.raises(DeviceError) as exc_info:
            raise_for_status(0x04, record="partial")
        assert exc_info.value.record == "partial"


class TestHierarchy:
    """Tests for exception base classes."""

    @pytest.mark.parametrize(
        "error_type,base",
        [
            (TimeoutError, TransportError),
            (IncompleteResponseError, FrameError),
            (FrameError, ProtocolError),
            (ChecksumError, ProtocolError),
            (UnexpectedResponseLengthError, ProtocolError),
            (DeviceError, SPS30Error),
            (PayloadTooLargeError, ValueError),
            (TransportError, SPS30Error),
        ],
    )
    def test_subclass(self, error_type, base):
        assert issubclass(error_type, base)

    def test_timeout_message(self):
        assert str(TimeoutError("No reply", timeout_seconds=1.0)) == "No reply (after 1.0s)"

    def test_checksum_message(self):
        error = ChecksumError("Checksum mismatch", expected=0x0B, received=0x0A)
        assert str(error) == "Checksum mismatch (expected 0x0B, got 0x0A)"
