"""Shared fixtures for sps30 tests."""

import pytest

from sps30.protocol.checksums import calculate_checksum, header_sum
from sps30.protocol.stuffing import stuff
from sps30.transport.mock import MockTransport, ScriptedMockTransport


def build_response(command, payload=b"", status=0, address=0):
    """Assemble a stuffed MISO frame the way the sensor sends it."""
    length = len(payload)
    checksum = calculate_checksum(header_sum(address, command, status), length, payload)
    body = stuff(bytes([address, command, status, length]) + bytes(payload) + bytes([checksum]))
    return b"\x7e" + body + b"\x7e"


@pytest.fixture
def response_frame():
    """Factory for sensor response frames."""
    return build_response


@pytest.fixture
def mock_transport():
    """Create an open MockTransport instance."""
    transport = MockTransport()
    transport.open()
    yield transport
    transport.close()


@pytest.fixture
def scripted_transport():
    """Create an open ScriptedMockTransport instance."""
    transport = ScriptedMockTransport()
    transport.open()
    yield transport
    transport.close()
