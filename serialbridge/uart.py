"""UART driver delivering barker-framed packets from a tty device."""

from __future__ import annotations

import os
import select
import termios
import time

from .serial import BUFFER_SIZE, BarkerFramer, SerialPort
from .singleton import Singleton

_POLL_INTERVAL = 0.01

_BAUD_RATES = {
    9600: termios.B9600,
    19200: termios.B19200,
    38400: termios.B38400,
    57600: termios.B57600,
    115200: termios.B115200,
    230400: termios.B230400,
}


def baud_constant(baud_rate: int) -> int:
    """Return the termios speed constant for a supported baud rate."""
    try:
        return _BAUD_RATES[baud_rate]
    except KeyError:
        raise ValueError("Unsupported baud rate") from None


def _hex(data: bytes) -> str:
    return " ".join(f"0x{byte:x}" for byte in data)


class UartInterface(Singleton, SerialPort):
    """Raw 8N1 UART that reassembles barker-framed packets on a thread."""

    UART_0 = "/dev/ttyAMA0"

    def __init__(self) -> None:
        super().__init__()
        self._framer = BarkerFramer()

    def set_properties(self, device_name, speed, mode, bits, rx_completed_handler):
        """Open and configure the device, then start receiving."""
        super().set_properties(device_name, speed, mode, bits, rx_completed_handler)
        print(f" Device Name: {self.device_name}")

        baud = baud_constant(speed)
        fd = os.open(device_name, os.O_RDWR | os.O_NOCTTY)
        try:
            attrs = termios.tcgetattr(fd)
            iflag, oflag, cflag, lflag, _ispeed, _ospeed, cc = attrs
            cflag |= termios.CLOCAL | termios.CREAD
            cflag &= ~termios.PARENB
            cflag &= ~termios.CSTOPB
            cflag &= ~termios.CSIZE
            cflag |= termios.CS8
            termios.tcsetattr(fd, termios.TCSANOW, [0, 0, cflag, 0, baud, baud, cc])
        except termios.error as exc:
            os.close(fd)
            raise OSError(*exc.args) from exc

        with self._lock:
            if self._fd is not None:
                os.close(self._fd)
            self._fd = fd

        self._start_receiving()

    def _receive_task(self) -> None:
        while self.is_running:
            fd = self._fd
            if fd is None:
                time.sleep(_POLL_INTERVAL)
                continue
            try:
                ready, _, _ = select.select([fd], [], [], _POLL_INTERVAL)
                chunk = os.read(fd, BUFFER_SIZE) if ready else None
            except (OSError, ValueError):
                time.sleep(_POLL_INTERVAL)
                continue

            if chunk is None:
                continue
            if not chunk:
                time.sleep(_POLL_INTERVAL)
                continue

            print(f"Bytes received: {_hex(chunk)}")
            packet = self._framer.feed(chunk)
            if packet is not None:
                print(f"[STATE] Full packet received! Size = {len(packet)}")
                handler = self.rx_completed_handler
                if handler is not None:
                    handler(packet)