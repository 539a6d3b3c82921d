"""
Pydantic models for SPS30 response records.

This module defines the typed records decoded from response payloads,
implemented as immutable Pydantic models with validation.

Design principles:
- All models are frozen (immutable)
- Each record knows its own payload layout via from_payload()
- Payloads of the wrong size raise ParseError, never a partial record
"""

from __future__ import annotations

import struct
from typing import Annotated, ClassVar, Final

from pydantic import BaseModel, ConfigDict, Field

from sps30.exceptions import ParseError

Byte = Annotated[int, Field(ge=0, le=255)]


class VersionInfo(BaseModel):
    """
    Firmware, hardware and SHDLC protocol versions.

    Decoded from the 7-byte READ_VERSION payload::

        [0] firmware major    [1] firmware minor    [2] reserved
        [3] hardware revision [4] reserved
        [5] SHDLC major       [6] SHDLC minor

    Example:
        >>> info = VersionInfo.from_payload(bytes([2, 2, 0, 7, 0, 2, 0]))
        >>> info.firmware_version
        '2.2'
    """

    model_config = ConfigDict(frozen=True)

    PAYLOAD_SIZE: ClassVar[int] = 7

    firmware_major: Byte
    firmware_minor: Byte
    hardware_revision: Byte
    protocol_major: Byte
    protocol_minor: Byte

    @property
    def firmware_version(self) -> str:
        return f"{self.firmware_major}.{self.firmware_minor}"

    @property
    def protocol_version(self) -> str:
        return f"{self.protocol_major}.{self.protocol_minor}"

    def __str__(self) -> str:
        return (
            f"FW: {self.firmware_version}, HW: {self.hardware_revision}, "
            f"SHDLC: {self.protocol_version}"
        )

    @classmethod
    def from_payload(cls, payload: bytes | bytearray) -> VersionInfo:
        """
        Decode a READ_VERSION payload.

        Raises:
            ParseError: If the payload is not exactly 7 bytes.
        """
        _check_size(cls.__name__, payload, cls.PAYLOAD_SIZE)
        return cls(
            firmware_major=payload[0],
            firmware_minor=payload[1],
            hardware_revision=payload[3],
            protocol_major=payload[5],
            protocol_minor=payload[6],
        )


# Ten big-endian IEEE-754 single precision floats
_MEASUREMENT_FORMAT: Final[struct.Struct] = struct.Struct(">10f")


class Measurement(BaseModel):
    """
    One set of particulate matter readings.

    Mass concentrations (mc_*) are in µg/m³, number concentrations (nc_*)
    in #/cm³ and the typical particle size in µm. The suffix names the
    particle size bin, e.g. mc_2p5 is PM2.5.

    Decoded from the 40-byte READ_MEASUREMENT payload: ten big-endian
    float32 values in field declaration order.
    """

    model_config = ConfigDict(frozen=True)

    PAYLOAD_SIZE: ClassVar[int] = _MEASUREMENT_FORMAT.size

    mc_1p0: float = Field(description="Mass concentration PM1.0 [µg/m³]")
    mc_2p5: float = Field(description="Mass concentration PM2.5 [µg/m³]")
    mc_4p0: float = Field(description="Mass concentration PM4.0 [µg/m³]")
    mc_10p0: float = Field(description="Mass concentration PM10 [µg/m³]")
    nc_0p5: float = Field(description="Number concentration PM0.5 [#/cm³]")
    nc_1p0: float = Field(description="Number concentration PM1.0 [#/cm³]")
    nc_2p5: float = Field(description="Number concentration PM2.5 [#/cm³]")
    nc_4p0: float = Field(description="Number concentration PM4.0 [#/cm³]")
    nc_10p0: float = Field(description="Number concentration PM10 [#/cm³]")
    typical_particle_size: float = Field(description="Typical particle size [µm]")

    def __str__(self) -> str:
        return (
            f"PM1.0={self.mc_1p0:.2f} PM2.5={self.mc_2p5:.2f} "
            f"PM4.0={self.mc_4p0:.2f} PM10={self.mc_10p0:.2f} µg/m³"
        )

    @classmethod
    def from_payload(cls, payload: bytes | bytearray) -> Measurement:
        """
        Decode a READ_MEASUREMENT payload.

        Raises:
            ParseError: If the payload is not exactly 40 bytes.
        """
        _check_size(cls.__name__, payload, cls.PAYLOAD_SIZE)
        values = _MEASUREMENT_FORMAT.unpack(bytes(payload))
        return cls(**dict(zip(cls.model_fields, values)))


class DeviceStatus(BaseModel):
    """
    Device status register.

    Decoded from the 5-byte READ_DEVICE_STATUS payload: a big-endian
    32-bit register followed by one reserved byte.

    Example:
        >>> status = DeviceStatus.from_payload(bytes([0, 0, 0, 0x10, 0]))
        >>> status.fan_error
        True
    """

    model_config = ConfigDict(frozen=True)

    PAYLOAD_SIZE: ClassVar[int] = 5

    FAN_SPEED_WARNING_BIT: ClassVar[int] = 21
    LASER_ERROR_BIT: ClassVar[int] = 5
    FAN_ERROR_BIT: ClassVar[int] = 4

    status_register: int = Field(ge=0, le=0xFFFFFFFF, description="Raw status register")

    @property
    def fan_speed_warning(self) -> bool:
        """Fan speed is out of range (too high or too low)."""
        return bool(self.status_register & (1 << self.FAN_SPEED_WARNING_BIT))

    @property
    def laser_error(self) -> bool:
        """Laser current is out of range."""
        return bool(self.status_register & (1 << self.LASER_ERROR_BIT))

    @property
    def fan_error(self) -> bool:
        """Fan is switched on but measured speed is 0 RPM."""
        return bool(self.status_register & (1 << self.FAN_ERROR_BIT))

    @property
    def has_errors(self) -> bool:
        return self.fan_speed_warning or self.laser_error or self.fan_error

    def __repr__(self) -> str:
        return f"DeviceStatus(status_register=0x{self.status_register:08X})"

    @classmethod
    def from_payload(cls, payload: bytes | bytearray) -> DeviceStatus:
        """
        Decode a READ_DEVICE_STATUS payload.

        Raises:
            ParseError: If the payload is not exactly 5 bytes.
        """
        _check_size(cls.__name__, payload, cls.PAYLOAD_SIZE)
        return cls(status_register=int.from_bytes(payload[:4], "big"))


def _check_size(record_type: str, payload: bytes | bytearray, size: int) -> None:
    if len(payload) != size:
        raise ParseError(
            f"Expected {size} payload bytes, got {len(payload)}",
            record_type=record_type,
            raw_data=bytes(payload),
        )
