"""Tests for data models."""

import struct

import pytest
from pydantic import BaseModel, ValidationError

from sps30.exceptions import ParseError
from sps30.models.records import DeviceStatus, Measurement, VersionInfo


class TestVersionInfo:
    """Tests for VersionInfo model."""

    def test_from_payload(self):
        """Test decoding skips the reserved bytes."""
        info = VersionInfo.from_payload(bytes([0x02, 0x03, 0xAA, 0x07, 0xBB, 0x02, 0x00]))
        assert info.firmware_major == 2
        assert info.firmware_minor == 3
        assert info.hardware_revision == 7
        assert info.protocol_major == 2
        assert info.protocol_minor == 0

    def test_version_strings(self):
        info = VersionInfo.from_payload(bytes([2, 2, 0, 7, 0, 2, 0]))
        assert info.firmware_version == "2.2"
        assert info.protocol_version == "2.0"

    def test_str(self):
        info = VersionInfo.from_payload(bytes([2, 3, 0, 7, 0, 2, 0]))
        assert str(info) == "FW: 2.3, HW: 7, SHDLC: 2.0"

    @pytest.mark.parametrize("size", [0, 6, 8])
    def test_wrong_size(self, size):
        """Test that payloads of the wrong size are rejected."""
        with pytest.raises(ParseError) as exc_info:
            VersionInfo.from_payload(bytes(size))
        assert exc_info.value.record_type == "VersionInfo"

    def test_frozen(self):
        """Test that records are immutable."""
        info = VersionInfo.from_payload(bytes(7))
        with pytest.raises(ValidationError):
            info.firmware_major = 3

    def test_byte_range_validated(self):
        with pytest.raises(ValidationError):
            VersionInfo(
                firmware_major=256,
                firmware_minor=0,
                hardware_revision=0,
                protocol_major=0,
                protocol_minor=0,
            )


class TestMeasurement:
    """Tests for Measurement model."""

    def test_from_payload_field_order(self):
        """Test that floats map to fields in declaration order."""
        values = [1.0, 2.5, 4.0, 10.0, 0.5, 1.0, 2.5, 4.0, 10.0, 0.75]
        measurement = Measurement.from_payload(struct.pack(">10f", *values))
        assert measurement.mc_1p0 == 1.0
        assert measurement.mc_2p5 == 2.5
        assert measurement.mc_4p0 == 4.0
        assert measurement.mc_10p0 == 10.0
        assert measurement.nc_0p5 == 0.5
        assert measurement.nc_10p0 == 10.0
        assert measurement.typical_particle_size == 0.75

    def test_fractional_values_exact(self):
        """Test that decoded values equal the float32 on the wire."""
        payload = bytes.fromhex(
            "3d2001e33d5adecf3d81cc533d8c48ae3e73397e"
            "3e97b9033e9e8b9f3e9ff1713ea04e183f365012"
        )
        measurement = Measurement.from_payload(payload)
        expected = struct.unpack(">10f", payload)
        assert measurement.mc_1p0 == expected[0]
        assert measurement.nc_0p5 == expected[4]
        assert measurement.typical_particle_size == expected[9]

    def test_big_endian(self):
        payload = bytes.fromhex("3f800000") + bytes(36)
        assert Measurement.from_payload(payload).mc_1p0 == 1.0

    @pytest.mark.parametrize("size", [0, 39, 41])
    def test_wrong_size(self, size):
        with pytest.raises(ParseError):
            Measurement.from_payload(bytes(size))

    def test_str(self):
        measurement = Measurement.from_payload(struct.pack(">10f", *[1.5] * 10))
        assert "PM2.5=1.50" in str(measurement)

    def test_payload_size(self):
        assert Measurement.PAYLOAD_SIZE == 40


class TestDeviceStatus:
    """Tests for DeviceStatus model."""

    def test_all_clear(self):
        status = DeviceStatus.from_payload(bytes(5))
        assert status.status_register == 0
        assert status.has_errors is False

    def test_fan_speed_warning(self):
        status = DeviceStatus.from_payload(bytes([0x00, 0x20, 0x00, 0x00, 0x00]))
        assert status.fan_speed_warning is True
        assert status.laser_error is False
        assert status.fan_error is False
        assert status.has_errors is True

    def test_laser_error(self):
        status = DeviceStatus.from_payload(bytes([0x00, 0x00, 0x00, 0x20, 0x00]))
        assert status.laser_error is True
        assert status.fan_error is False

    def test_fan_error(self):
        status = DeviceStatus.from_payload(bytes([0x00, 0x00, 0x00, 0x10, 0x00]))
        assert status.fan_error is True
        assert status.laser_error is False

    def test_reserved_byte_ignored(self):
        status = DeviceStatus.from_payload(bytes([0x00, 0x00, 0x00, 0x00, 0xFF]))
        assert status.status_register == 0

    def test_repr(self):
        status = DeviceStatus(status_register=0x00200030)
        assert repr(status) == "DeviceStatus(status_register=0x00200030)"

    def test_wrong_size(self):
        with pytest.raises(ParseError):
            DeviceStatus.from_payload(bytes(4))


class TestRecordFields:
    """Tests shared by all records."""

    @pytest.mark.parametrize("model", [VersionInfo, Measurement, DeviceStatus])
    def test_fields_do_not_shadow_base_model(self, model):
        """Test that no field hides a BaseModel attribute, which pydantic warns about."""
        for name in model.model_fields:
            assert not hasattr(BaseModel, name), name
