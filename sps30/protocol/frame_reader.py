"""
SHDLC response frame parsing.

Response frame layout (MISO)::

    +-------+------+-----+-------+-----+-----------+-----+------+
    | START | ADDR | CMD | STATE | LEN |   DATA    | CHK | STOP |
    | 0x7E  |  1   |  1  |   1   |  1  | 0..255 B  |  1  | 0x7E |
    +-------+------+-----+-------+-----+-----------+-----+------+

Parsing is a single pass over a buffer that holds one complete frame:

1. START marker
2. Header fields (ADDR, CMD, STATE, LEN), each possibly escaped
3. LEN payload bytes, each possibly escaped
4. Checksum over ADDR + CMD + STATE, LEN and the payload, itself possibly escaped
5. STOP marker

Every failure raises a specific FrameError subclass (or ChecksumError), so a
corrupt frame is never returned to the caller.
"""

from __future__ import annotations

from dataclasses import dataclass

from sps30.exceptions import (
    ChecksumError,
    FrameTooShortError,
    IncompleteResponseError,
    MissingStartMarkerError,
    MissingStopMarkerError,
    UnexpectedResponseLengthError,
    describe_status,
)
from sps30.protocol.checksums import calculate_checksum, header_sum
from sps30.protocol.constants import CommandCode, ProtocolConstants
from sps30.protocol.stuffing import destuff_byte


@dataclass(frozen=True)
class FrameHeader:
    """
    Logical header of a response frame.

    Attributes:
        address: Peripheral address the response came from.
        command: Command code the response answers.
        status: Device state byte, 0 on success.
        declared_length: Payload length announced in the LEN field.
    """

    address: int
    command: int
    status: int
    declared_length: int

    @property
    def header_sum(self) -> int:
        """Sum of ADDR, CMD and STATE used by the receive checksum."""
        return header_sum(self.address, self.command, self.status)


@dataclass(frozen=True)
class ShdlcFrame:
    """
    A successfully parsed and validated response frame.

    Attributes:
        header: Logical header fields.
        payload: Destuffed payload, exactly header.declared_length bytes.
        raw_frame: Frame bytes as received, markers included.
    """

    header: FrameHeader
    payload: bytes
    raw_frame: bytes

    @property
    def command(self) -> CommandCode | int:
        """
        Get command as CommandCode enum if recognized, else raw int.
        """
        try:
            return CommandCode(self.header.command)
        except ValueError:
            return self.header.command

    @property
    def status(self) -> int:
        return self.header.status

    @property
    def is_error(self) -> bool:
        """Check if the device reported an error state."""
        return self.header.status != 0

    def __repr__(self) -> str:
        cmd_name = (
            self.command.name
            if isinstance(self.command, CommandCode)
            else f"0x{self.header.command:02X}"
        )
        parts = [cmd_name]
        if self.is_error:
            parts.append(f"status={self.status} ({describe_status(self.status)})")
        if self.payload:
            parts.append(f"payload={len(self.payload)} bytes")
        return f"ShdlcFrame({', '.join(parts)})"


class FrameReader:
    """
    SHDLC response frame parser.

    The parser is stateless and can be reused for multiple parse operations.

    Example:
        >>> reader = FrameReader()
        >>> frame = reader.parse(bytes.fromhex("7e00000000ff7e"), max_length=0)
        >>> frame.header.command
        0
    """

    def parse(
        self,
        buffer: bytes | bytearray | memoryview,
        max_length: int = ProtocolConstants.MAX_PAYLOAD_LENGTH,
    ) -> ShdlcFrame:
        """
        Parse one response frame.

        Args:
            buffer: Raw bytes as read from the transport, starting at the
                START marker.
            max_length: Largest payload the caller is prepared to accept.

        Returns:
            The parsed frame.

        Raises:
            FrameTooShortError: Buffer is shorter than the minimum frame.
            MissingStartMarkerError: First byte is not 0x7E.
            TruncatedFrameError: Buffer ends inside a field.
            UnexpectedResponseLengthError: Declared length exceeds max_length.
            IncompleteResponseError: Fewer payload bytes than declared.
            ChecksumError: Checksum does not match.
            MissingStopMarkerError: Byte after the checksum is not 0x7E.
        """
        raw = bytes(buffer)

        if len(raw) < ProtocolConstants.MIN_FRAME_SIZE:
            raise FrameTooShortError(
                f"Frame too short: need at least {ProtocolConstants.MIN_FRAME_SIZE} "
                f"bytes, got {len(raw)}",
                raw_frame=raw,
            )

        if raw[0] != ProtocolConstants.START:
            raise MissingStartMarkerError(
                f"Missing start marker, found 0x{raw[0]:02X}",
                raw_frame=raw,
            )

        index = 1
        address, index = destuff_byte(raw, index)
        command, index = destuff_byte(raw, index)
        status, index = destuff_byte(raw, index)
        declared_length, index = destuff_byte(raw, index)
        header = FrameHeader(address, command, status, declared_length)

        if declared_length > max_length:
            raise UnexpectedResponseLengthError(command, max_length, declared_length)

        payload = bytearray()
        while len(payload) < declared_length:
            # An unescaped marker can only be the STOP byte
            if index >= len(raw) or raw[index] == ProtocolConstants.STOP:
                raise IncompleteResponseError(
                    f"Frame declares {declared_length} payload bytes, "
                    f"only {len(payload)} received",
                    raw_frame=raw,
                )
            byte, index = destuff_byte(raw, index)
            payload.append(byte)

        received_checksum, index = destuff_byte(raw, index)
        expected_checksum = calculate_checksum(header.header_sum, declared_length, payload)
        if received_checksum != expected_checksum:
            raise ChecksumError(
                "Checksum mismatch",
                expected=expected_checksum,
                received=received_checksum,
            )

        if index >= len(raw) or raw[index] != ProtocolConstants.STOP:
            found = f"0x{raw[index]:02X}" if index < len(raw) else "end of data"
            raise MissingStopMarkerError(
                f"Missing stop marker at offset {index}, found {found}",
                raw_frame=raw,
            )

        return ShdlcFrame(
            header=header,
            payload=bytes(payload),
            raw_frame=raw[: index + 1],
        )


# Module-level convenience instance
DEFAULT_FRAME_READER: FrameReader = FrameReader()
"""Default FrameReader instance for convenience."""


def decode_frame(
    buffer: bytes | bytearray | memoryview,
    max_length: int = ProtocolConstants.MAX_PAYLOAD_LENGTH,
) -> ShdlcFrame:
    """
    Parse a frame using the default frame reader.

    Args:
        buffer: Raw frame bytes.
        max_length: Largest payload the caller is prepared to accept.

    Returns:
        The parsed frame.
    """
    return DEFAULT_FRAME_READER.parse(buffer, max_length)
