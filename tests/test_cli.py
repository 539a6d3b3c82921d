"""Tests for the command line interface."""

import logging
import struct

import pytest

from sps30 import cli
from sps30.client import SPS30Client
from sps30.exceptions import DeviceError
from sps30.transport.mock import MockTransport


def sensor_responses(build_response, measurements=1):
    """Replies for wakeup, version, start, N measurements and stop."""
    payload = struct.pack(">10f", *[2.5] * 10)
    return [
        build_response(0x11),
        build_response(0xD1, bytes([2, 3, 0, 7, 0, 2, 0])),
        build_response(0x00),
        *[build_response(0x03, payload) for _ in range(measurements)],
        build_response(0x01),
    ]


@pytest.fixture
def restore_root_level():
    root = logging.getLogger()
    level = root.level
    yield
    root.setLevel(level)


class TestParser:
    """Tests for argument parsing."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("SPS30_PORT", raising=False)
        args = cli.create_parser().parse_args(["--port", "/dev/ttyUSB0"])
        assert args.port == "/dev/ttyUSB0"
        assert args.baudrate == 115200
        assert args.timeout == 1.0
        assert args.interval == 1.0
        assert args.count == 0
        assert args.verbose is False

    def test_port_from_environment(self, monkeypatch):
        monkeypatch.setenv("SPS30_PORT", "COM3")
        args = cli.create_parser().parse_args([])
        assert args.port == "COM3"

    def test_overrides(self):
        args = cli.create_parser().parse_args(
            ["--port", "x", "--baudrate", "9600", "--timeout", "2.5", "--count", "3", "-v"]
        )
        assert args.baudrate == 9600
        assert args.timeout == 2.5
        assert args.count == 3
        assert args.verbose is True


class TestMain:
    """Tests for main()."""

    def test_missing_port(self, monkeypatch):
        monkeypatch.delenv("SPS30_PORT", raising=False)
        with pytest.raises(SystemExit) as exc_info:
            cli.main([])
        assert exc_info.value.code == 2

    def test_negative_count(self):
        with pytest.raises(SystemExit):
            cli.main(["--port", "x", "--count", "-1"])

    def test_invalid_timeout(self, restore_root_level):
        """Test that SerialConfig validation errors become usage errors."""
        with pytest.raises(SystemExit) as exc_info:
            cli.main(["--port", "x", "--timeout", "0"])
        assert exc_info.value.code == 2

    def test_success(self, monkeypatch, response_frame, capsys, restore_root_level):
        transport = MockTransport()
        transport.add_responses(*sensor_responses(response_frame, 2))
        monkeypatch.setattr(cli.SerialTransport, "from_config", lambda config: transport)

        code = cli.main(["--port", "x", "--interval", "0", "--count", "2"])

        assert code == 0
        out = capsys.readouterr().out
        assert "FW: 2.3, HW: 7, SHDLC: 2.0" in out
        assert out.count("PM2.5=2.50") == 2
        assert not transport.is_open

    def test_sensor_error_exit_code(self, monkeypatch, restore_root_level):
        """Test that a silent sensor ends with exit code 1."""
        transport = MockTransport()
        monkeypatch.setattr(cli.SerialTransport, "from_config", lambda config: transport)
        assert cli.main(["--port", "x", "--interval", "0", "--count", "1"]) == 1


class TestRun:
    """Tests for the polling loop."""

    def test_run_stops_measurement(self, mock_transport, response_frame):
        mock_transport.add_responses(*sensor_responses(response_frame, 3))
        printed = cli.run(SPS30Client(mock_transport), interval=0, count=3)

        assert printed == 3
        assert mock_transport.last_written == bytes.fromhex("7e000100fe7e")

    def test_run_stops_measurement_on_error(self, mock_transport, response_frame):
        """Test that measurement is stopped when a read fails."""
        responses = sensor_responses(response_frame, 0)
        # Device error on the first read, then the stop reply
        responses.insert(3, response_frame(0x03, status=0x43))
        mock_transport.add_responses(*responses)

        with pytest.raises(DeviceError):
            cli.run(SPS30Client(mock_transport), interval=0, count=1)
        assert mock_transport.last_written == bytes.fromhex("7e000100fe7e")

    def test_failed_stop_keeps_original_error(self, mock_transport, response_frame, caplog):
        """Test that a failing stop after a read error is logged, not raised."""
        responses = sensor_responses(response_frame, 0)[:3]
        responses.append(response_frame(0x03, status=0x43))
        # No reply to the stop request
        mock_transport.add_responses(*responses)

        with caplog.at_level(logging.WARNING, logger="sps30.cli"):
            with pytest.raises(DeviceError) as exc_info:
                cli.run(SPS30Client(mock_transport), interval=0, count=1)

        assert exc_info.value.status == 0x43
        assert mock_transport.last_written == bytes.fromhex("7e000100fe7e")
        assert "Could not stop measurement" in caplog.text


class TestSetupLogging:
    """Tests for setup_logging()."""

    def test_verbose(self, restore_root_level):
        cli.setup_logging(verbose=True)
        assert logging.getLogger().level == logging.DEBUG

    def test_default_level(self, restore_root_level):
        cli.setup_logging()
        assert logging.getLogger().level == logging.INFO
