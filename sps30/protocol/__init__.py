"""
Protocol layer for SHDLC communication.

This module contains the low-level protocol handling:
- Command codes, descriptors and protocol constants
- Checksum calculation and validation
- Byte stuffing
- Frame encoding and parsing
"""

from sps30.protocol.checksums import calculate_checksum, header_sum, validate_checksum
from sps30.protocol.constants import (
    COMMANDS,
    CommandCode,
    CommandDescriptor,
    ProtocolConstants,
)
from sps30.protocol.frame_reader import (
    DEFAULT_FRAME_READER,
    FrameHeader,
    FrameReader,
    ShdlcFrame,
    decode_frame,
)
from sps30.protocol.frame_writer import encode_frame
from sps30.protocol.stuffing import destuff, destuff_byte, stuff

__all__ = [
    # Constants
    "CommandCode",
    "CommandDescriptor",
    "COMMANDS",
    "ProtocolConstants",
    # Checksums
    "calculate_checksum",
    "header_sum",
    "validate_checksum",
    # Stuffing
    "stuff",
    "destuff",
    "destuff_byte",
    # Frames
    "encode_frame",
    "FrameHeader",
    "FrameReader",
    "ShdlcFrame",
    "decode_frame",
    "DEFAULT_FRAME_READER",
]
