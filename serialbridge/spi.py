"""SPI driver exchanging full-duplex transfers through a spidev device."""

from __future__ import annotations

import enum
import fcntl
import os
import struct
import sys
import time
from array import array
from collections.abc import Iterable

from .serial import SerialPort
from .singleton import Singleton

_SPI_IOC_MAGIC = ord("k")


def _iow(number: int, size: int) -> int:
    return (1 << 30) | (size << 16) | (_SPI_IOC_MAGIC << 8) | number


# struct spi_ioc_transfer: tx_buf, rx_buf, len, speed_hz, delay_usecs,
# bits_per_word, cs_change, tx_nbits, rx_nbits, word_delay_usecs, pad
_TRANSFER = struct.Struct("=QQIIHBBBBBB")

SPI_IOC_WR_MODE = _iow(1, 1)
SPI_IOC_WR_BITS_PER_WORD = _iow(3, 1)
SPI_IOC_WR_MAX_SPEED_HZ = _iow(4, 4)
SPI_IOC_MESSAGE_1 = _iow(0, _TRANSFER.size)

_POLL_INTERVAL = 0.01
_EXPECTED_LENGTH = 250
_PACKET_MARKER = 0x55


class SpiSpeed(enum.IntEnum):
    """Common SPI clock speeds in hertz."""

    SPEED_125_KHZ = 125000
    SPEED_250_KHZ = 250000
    SPEED_500_KHZ = 500000
    SPEED_1_MHZ = 1000000
    SPEED_2_MHZ = 2000000
    SPEED_4_MHZ = 4000000
    SPEED_8_MHZ = 8000000
    SPEED_16_MHZ = 16000000


class SpiInterface(Singleton, SerialPort):
    """SPI master that polls the bus on a thread for marked packets."""

    SPI_0 = "/dev/spidev0.0"

    def set_properties(self, device_name, speed, mode, bits, rx_completed_handler):
        """Open the device, set mode, word size and clock, then start polling."""
        speed = int(speed)
        super().set_properties(device_name, speed, mode, bits, rx_completed_handler)
        print(f"Device name: {self.device_name}")

        fd = os.open(device_name, os.O_RDWR)
        print(f"_spiInstance = {fd}")
        try:
            fcntl.ioctl(fd, SPI_IOC_WR_MODE, struct.pack("=B", mode))
            fcntl.ioctl(fd, SPI_IOC_WR_BITS_PER_WORD, struct.pack("=B", bits))
            fcntl.ioctl(fd, SPI_IOC_WR_MAX_SPEED_HZ, struct.pack("=I", speed))
        except OSError:
            os.close(fd)
            raise

        print(f"SPI configured: mode={mode}, bits={bits}, speed={speed} Hz")

        with self._lock:
            if self._fd is not None:
                os.close(self._fd)
            self._fd = fd

        self._start_receiving()

    def transfer(self, tx: Iterable[int], cs_change: bool = False) -> bytes:
        """Clock ``tx`` out and return the bytes clocked in at the same time."""
        tx_buf = array("B", bytes(tx))
        length = len(tx_buf)
        if not length:
            raise ValueError("nothing to transfer")
        rx_buf = array("B", bytes(length))

        with self._lock:
            fd = self._require_fd()
            request = bytearray(
                _TRANSFER.pack(
                    tx_buf.buffer_info()[0],
                    rx_buf.buffer_info()[0],
                    length,
                    self.current_speed,
                    0,
                    8,
                    1 if cs_change else 0,
                    0,
                    0,
                    0,
                    0,
                )
            )
            transferred = fcntl.ioctl(fd, SPI_IOC_MESSAGE_1, request, True)

        if transferred != length:
            print(
                f"Warning: only {transferred}/{length} bytes transferred",
                file=sys.stderr,
            )
        return rx_buf.tobytes()

    def _receive_task(self) -> None:
        while self.is_running:
            try:
                payload = self.transfer(bytes(_EXPECTED_LENGTH))
            except (OSError, RuntimeError):
                payload = None

            handler = self.rx_completed_handler
            if payload is not None and handler is not None and payload[1] == _PACKET_MARKER:
                handler(payload)

            time.sleep(_POLL_INTERVAL)