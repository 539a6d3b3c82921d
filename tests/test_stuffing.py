"""Tests for SHDLC byte stuffing."""

import pytest

from sps30.exceptions import FrameError, TruncatedFrameError
from sps30.protocol.stuffing import destuff, destuff_byte, stuff


class TestStuff:
    """Tests for stuff()."""

    @pytest.mark.parametrize(
        "data,expected",
        [
            (b"\x00", b"\x00"),
            (b"\x7e", b"\x7d\x5e"),
            (b"\x7e\x7d\x11\x13", b"\x7d\x5e\x7d\x5d\x7d\x31\x7d\x33"),
            (b"\x34\x03\x00\xf1", b"\x34\x03\x00\xf1"),
        ],
    )
    def test_stuff(self, data, expected):
        """Test escaping of reserved values."""
        assert stuff(data) == expected

    def test_empty(self):
        assert stuff(b"") == b""

    def test_output_has_no_marker(self):
        """Test that stuffed data never contains the frame marker."""
        assert 0x7E not in stuff(bytes(range(256)))


class TestDestuffByte:
    """Tests for destuff_byte()."""

    @pytest.mark.parametrize(
        "data,index,expected_byte,expected_next",
        [
            (b"\x7d\x31\x03\x05", 0, 0x11, 2),
            (b"\x7d\x31\x03\x05", 2, 0x03, 3),
            (b"\x7d\x31\x7d\x33", 2, 0x13, 4),
            (b"\xff\x31\x03\x05", 0, 0xFF, 1),
        ],
    )
    def test_destuff_byte(self, data, index, expected_byte, expected_next):
        """Test decoding single bytes at a cursor."""
        assert destuff_byte(data, index) == (expected_byte, expected_next)

    def test_index_past_end_raises(self):
        """Test that reading past the buffer raises."""
        with pytest.raises(TruncatedFrameError):
            destuff_byte(b"\x01\x02", 2)

    def test_trailing_escape_raises(self):
        """Test that an escape byte with nothing after it raises."""
        with pytest.raises(TruncatedFrameError):
            destuff_byte(b"\x01\x7d", 1)

    def test_truncated_is_frame_error(self):
        with pytest.raises(FrameError):
            destuff_byte(b"", 0)


class TestDestuff:
    """Tests for destuff()."""

    def test_destuff(self):
        assert destuff(b"\x7d\x5e\x7d\x5d\x7d\x31\x7d\x33") == b"\x7e\x7d\x11\x13"

    def test_round_trip_all_values(self):
        """Test that destuffing reverses stuffing."""
        data = bytes(range(256))
        assert destuff(stuff(data)) == data

    def test_dangling_escape_raises(self):
        with pytest.raises(TruncatedFrameError):
            destuff(b"\x00\x7d")
