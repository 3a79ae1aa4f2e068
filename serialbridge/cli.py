"""Command that sends a test pattern over a serial link and prints replies."""

from __future__ import annotations

import argparse
import sys
import time
from collections.abc import Sequence
from typing import Optional

from .spi import SpiInterface, SpiSpeed
from .uart import UartInterface

_DEFAULT_BAUD = 115200
_DEFAULT_INTERVAL = 3.0
_PATTERN_LENGTH = 255 * 2


def format_packet(packet: bytes) -> str:
    """Describe a received packet: its length and its bytes in hex."""
    body = "".join(f"0x{byte:x} " for byte in packet)
    return f"Length = {len(packet)}\n\nPacket Received: {body}"


def _print_packet(packet: bytes) -> None:
    print(format_packet(packet))


def _test_pattern() -> bytes:
    return bytes(counter % 256 for counter in range(_PATTERN_LENGTH))


def _positive_int(text: str) -> int:
    value = int(text)
    if value <= 0:
        raise argparse.ArgumentTypeError("must be positive")
    return value


def _parse_args(argv: Optional[Sequence[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="serialbridge",
        description="Repeatedly send a framed test pattern and print received packets.",
    )
    parser.add_argument("--interface", choices=("uart", "spi"), default="uart")
    parser.add_argument("--device", help="device path (defaults per interface)")
    parser.add_argument("--baud", type=int, help="baud rate or SPI clock in hertz")
    parser.add_argument(
        "--interval", type=float, default=_DEFAULT_INTERVAL, help="seconds between sends"
    )
    parser.add_argument(
        "--count", type=_positive_int, help="number of sends (default: until interrupted)"
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Configure the chosen interface and send the test pattern."""
    args = _parse_args(argv)

    if args.interface == "spi":
        port = SpiInterface.instance()
        device = args.device or SpiInterface.SPI_0
        speed = args.baud or int(SpiSpeed.SPEED_4_MHZ)
        bits = 8
    else:
        port = UartInterface.instance()
        device = args.device or UartInterface.UART_0
        speed = args.baud or _DEFAULT_BAUD
        bits = 0

    try:
        port.set_properties(device, speed, 0, bits, _print_packet)
    except (OSError, ValueError) as exc:
        print(f"exception {exc}", file=sys.stderr)
        return 1

    payload = _test_pattern()
    sent = 0
    try:
        while args.count is None or sent < args.count:
            port.transmit(payload)
            sent += 1
            if args.count is None or sent < args.count:
                time.sleep(args.interval)
    except KeyboardInterrupt:
        pass
    except OSError as exc:
        print(f"exception {exc}", file=sys.stderr)
        return 1
    finally:
        port.stop()
    return 0


if __name__ == "__main__":
    sys.exit(main())