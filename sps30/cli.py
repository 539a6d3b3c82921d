"""
Command line interface.

Wakes the sensor, prints its version, starts measuring and prints a
measurement every interval until the requested count is reached or the
user interrupts.

Usage:
    python -m sps30 --port /dev/ttyUSB0 --interval 1 --count 10
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
import time

from pydantic import ValidationError

from sps30 import __version__
from sps30.client import SPS30Client
from sps30.config import SerialConfig
from sps30.exceptions import SPS30Error
from sps30.protocol.constants import ProtocolConstants
from sps30.transport.serial_port import SerialTransport

logger = logging.getLogger(__name__)

PORT_ENV_VAR = "SPS30_PORT"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(verbose: bool = False) -> None:
    """
    Configure the root logger with a console handler.

    Args:
        verbose: Log at DEBUG instead of INFO, which includes TX/RX dumps.
    """
    root = logging.getLogger()
    root.setLevel(logging.DEBUG if verbose else logging.INFO)

    if not root.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)


def create_parser() -> argparse.ArgumentParser:
    """Create the command line argument parser."""
    parser = argparse.ArgumentParser(
        prog="sps30",
        description="Read particulate matter measurements from a Sensirion SPS30.",
        epilog=f"The port may also be given in the {PORT_ENV_VAR} environment variable.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--port",
        default=os.environ.get(PORT_ENV_VAR),
        help="serial port or pyserial URL (e.g. /dev/ttyUSB0, COM3)",
    )
    parser.add_argument(
        "--baudrate",
        type=int,
        default=ProtocolConstants.DEFAULT_BAUD_RATE,
        help="baud rate (default: %(default)s)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=ProtocolConstants.DEFAULT_RECEIVE_TIMEOUT,
        help="read timeout in seconds (default: %(default)s)",
    )
    parser.add_argument(
        "--interval",
        type=float,
        default=1.0,
        help="seconds between measurements (default: %(default)s)",
    )
    parser.add_argument(
        "--count",
        type=int,
        default=0,
        help="number of measurements to read, 0 for no limit (default: %(default)s)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    return parser


def run(sensor: SPS30Client, interval: float, count: int = 0) -> int:
    """
    Poll the sensor and print each measurement.

    The sensor must already be open. Measurement is stopped again before
    returning, also on errors.

    Returns:
        Number of measurements printed.
    """
    sensor.wakeup()
    print(sensor.read_version())

    sensor.start_measurement()
    printed = 0
    try:
        while count <= 0 or printed < count:
            time.sleep(interval)
            print(sensor.read_measurement())
            printed += 1
    except BaseException:
        try:
            sensor.stop_measurement()
        except SPS30Error as e:
            logger.warning("Could not stop measurement: %s", e)
        raise
    sensor.stop_measurement()
    return printed


def main(argv: list[str] | None = None) -> int:
    """
    Entry point for the sps30 command.

    Returns:
        Process exit code.
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.port:
        parser.error(f"--port is required (or set {PORT_ENV_VAR})")
    if args.count < 0:
        parser.error("--count must not be negative")
    if args.interval < 0:
        parser.error("--interval must not be negative")

    setup_logging(args.verbose)

    try:
        config = SerialConfig(port=args.port, baudrate=args.baudrate, timeout=args.timeout)
    except ValidationError as e:
        parser.error(f"invalid serial settings: {e}")

    try:
        with SPS30Client(SerialTransport.from_config(config)) as sensor:
            run(sensor, args.interval, args.count)
    except KeyboardInterrupt:
        logger.info("Interrupted")
        return 130
    except SPS30Error as e:
        logger.error("%s", e)
        return 1

    return 0
