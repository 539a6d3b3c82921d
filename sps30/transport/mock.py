"""
In-memory transports for driving SPS30Client in tests.

Reads behave like pyserial after a timeout: buffered bytes come back as they
are, and TimeoutError is raised only when nothing is buffered.

Example:
    >>> mock = MockTransport()
    >>> mock.add_response(bytes.fromhex("7e00000000ff7e"))
    >>> with SPS30Client(mock) as sensor:
    ...     sensor.start_measurement()
"""

from __future__ import annotations

from collections import deque
from typing import Callable

from sps30.exceptions import TimeoutError, TransportError
from sps30.transport.abc import AbstractTransport


class MockTransport(AbstractTransport):
    """
    Transport that replays queued SHDLC replies and records every request.

    Queued replies are consumed in order as reads ask for more bytes. A reply
    may be split over several queue entries to imitate a slow line.
    """

    def __init__(self, port_name: str = "mock://test") -> None:
        self._port_name = port_name
        self._is_open = False
        self._responses: deque[bytes] = deque()
        self._written_data: list[bytes] = []
        self._read_buffer = bytearray()
        self._response_callback: Callable[[bytes], bytes | None] | None = None

    @property
    def is_open(self) -> bool:
        return self._is_open

    @property
    def port_name(self) -> str:
        return self._port_name

    @property
    def written_data(self) -> list[bytes]:
        """Requests in write order."""
        return self._written_data.copy()

    @property
    def last_written(self) -> bytes | None:
        return self._written_data[-1] if self._written_data else None

    def add_response(self, response: bytes) -> None:
        self._responses.append(response)

    def add_responses(self, *responses: bytes) -> None:
        self._responses.extend(responses)

    def set_response_callback(
        self,
        callback: Callable[[bytes], bytes | None] | None,
    ) -> None:
        """
        Answer each request from `callback(request)`.

        A None result leaves the reply to the queue.
        """
        self._response_callback = callback

    def clear(self) -> None:
        """Forget recorded requests and drop all pending replies."""
        self._written_data.clear()
        self._responses.clear()
        self._read_buffer.clear()

    def open(self) -> None:
        if self._is_open:
            raise TransportError("Mock transport already open")
        self._is_open = True

    def close(self) -> None:
        self._is_open = False

    def write(self, data: bytes) -> None:
        if not self._is_open:
            raise TransportError("Mock transport not open")

        self._written_data.append(bytes(data))

        if self._response_callback:
            response = self._response_callback(bytes(data))
            if response is not None:
                self._read_buffer.extend(response)

    def read(self, size: int) -> bytes:
        if not self._is_open:
            raise TransportError("Mock transport not open")

        if size <= 0:
            return b""

        while len(self._read_buffer) < size and self._responses:
            self._read_buffer.extend(self._responses.popleft())

        if not self._read_buffer:
            raise TimeoutError("No mock response available")

        result = bytes(self._read_buffer[:size])
        del self._read_buffer[:size]
        return result

    def read_until(self, terminator: int, size: int | None = None) -> bytes:
        """Return bytes up to and including `terminator`, or all that is buffered."""
        if not self._is_open:
            raise TransportError("Mock transport not open")

        while terminator not in self._read_buffer and self._responses:
            self._read_buffer.extend(self._responses.popleft())

        if not self._read_buffer:
            raise TimeoutError("No mock response available")

        if terminator in self._read_buffer:
            end = self._read_buffer.index(terminator) + 1
        else:
            end = len(self._read_buffer)
        if size is not None:
            end = min(end, size)

        result = bytes(self._read_buffer[:end])
        del self._read_buffer[:end]
        return result

    def discard_buffers(self) -> None:
        self._read_buffer.clear()

    def assert_written(self, expected: bytes, index: int = -1) -> None:
        """Fail unless request `index` equals `expected`."""
        if not self._written_data:
            raise AssertionError("No data written to mock transport")

        actual = self._written_data[index]
        if actual != expected:
            raise AssertionError(
                f"Written data mismatch: expected {expected.hex(' ')}, got {actual.hex(' ')}"
            )

    def assert_write_count(self, expected: int) -> None:
        actual = len(self._written_data)
        if actual != expected:
            raise AssertionError(f"Write count mismatch: expected {expected}, got {actual}")


class ScriptedMockTransport(MockTransport):
    """
    Transport that pairs each request with one scripted reply.

    A step's reply becomes readable only once its request has been written.
    Writes past the end of the script are recorded and get no reply.
    """

    def __init__(self, port_name: str = "mock://scripted") -> None:
        super().__init__(port_name)
        self._script: list[tuple[bytes | None, bytes]] = []
        self._script_index = 0

    @property
    def script_done(self) -> bool:
        return self._script_index >= len(self._script)

    def expect(
        self,
        response: bytes,
        request: bytes | None = None,
    ) -> None:
        """Append a step; a request of None accepts any bytes."""
        self._script.append((request, response))

    def write(self, data: bytes) -> None:
        if not self._is_open:
            raise TransportError("Mock transport not open")

        self._written_data.append(bytes(data))

        if self._script_index < len(self._script):
            expected_request, response = self._script[self._script_index]

            if expected_request is not None and data != expected_request:
                raise AssertionError(
                    f"Script mismatch at step {self._script_index}: "
                    f"expected {expected_request.hex(' ')}, got {bytes(data).hex(' ')}"
                )

            self._read_buffer.extend(response)
            self._script_index += 1
