"""
Data models for SPS30 response records.

This module contains Pydantic models representing the payloads returned by
the sensor:

- VersionInfo (firmware, hardware and protocol versions)
- Measurement (mass/number concentrations and typical particle size)
- DeviceStatus (status register flags)
"""

from sps30.models.records import DeviceStatus, Measurement, VersionInfo

__all__ = [
    "DeviceStatus",
    "Measurement",
    "VersionInfo",
]
