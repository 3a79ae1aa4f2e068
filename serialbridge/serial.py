"""Framed byte transport shared by the serial device drivers."""

from __future__ import annotations

import os
import threading
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable
from typing import Optional

RxHandler = Callable[[bytes], None]

START_BARKER = b"\xaa\xaa"
END_BARKER = b"\xff\xff"
BUFFER_SIZE = 1024


def frame(payload: Iterable[int]) -> bytes:
    """Wrap a payload between the start and end barkers."""
    return START_BARKER + bytes(payload) + END_BARKER


def _hex(data: bytes) -> str:
    return " ".join(f"0x{byte:x}" for byte in data)


class BarkerFramer:
    """Reassembles barker-delimited packets from chunks read off a device.

    A chunk is searched for the start barker; the bytes after it are collected
    until the end barker shows up, in the same chunk or a later one. Bytes
    outside a packet, including any after the end barker in the chunk that
    completes it, are dropped.
    """

    def __init__(self) -> None:
        self._collecting = False
        self._pending = bytearray()

    @property
    def collecting(self) -> bool:
        """True once a start barker was seen and the end is still awaited."""
        return self._collecting

    def reset(self) -> None:
        """Forget any partly collected packet."""
        self._collecting = False
        self._pending.clear()

    def feed(self, chunk: Iterable[int]) -> Optional[bytes]:
        """Take one chunk; return the payload if it completes a packet."""
        data = bytes(chunk)
        if self._collecting:
            body_start = 0
            end = data.find(END_BARKER)
        else:
            start = data.find(START_BARKER)
            if start < 0:
                return None
            self._collecting = True
            body_start = start + len(START_BARKER)
            end = data.find(END_BARKER, body_start)

        if end < 0:
            self._pending += data[body_start:]
            return None

        self._pending += data[body_start:end]
        packet = bytes(self._pending)
        self.reset()
        return packet


class SerialPort(ABC):
    """A serial device that sends framed packets and receives on a thread."""

    def __init__(self) -> None:
        self.rx_completed_handler: Optional[RxHandler] = None
        self._device_name = ""
        self._speed = 0
        self._fd: Optional[int] = None
        self._lock = threading.Lock()
        self._running = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def device_name(self) -> str:
        """Path of the configured device."""
        return self._device_name

    @property
    def current_speed(self) -> int:
        """Configured baud rate or clock speed."""
        return self._speed

    @property
    def is_running(self) -> bool:
        """True while the receive thread is active."""
        return self._running.is_set()

    def set_properties(self, device_name, speed, mode, bits, rx_completed_handler):
        """Record the device settings and the handler for received packets."""
        self.rx_completed_handler = rx_completed_handler
        self._device_name = device_name
        self._speed = speed

    def transmit(self, data: Iterable[int]) -> bool:
        """Send ``data`` framed by barkers; return True if all of it was written."""
        with self._lock:
            fd = self._require_fd()
            packet = frame(data)
            print(f"Length: {len(packet)}")
            print(f"Send: {_hex(packet)}")
            return os.write(fd, packet) == len(packet)

    def receive(self, length: int) -> bytes:
        """Read up to ``length`` raw bytes from the device."""
        if length < 0:
            raise ValueError("length must not be negative")
        with self._lock:
            return os.read(self._require_fd(), length)

    def stop(self) -> None:
        """Stop the receive thread and close the device."""
        self._running.clear()
        thread, self._thread = self._thread, None
        if thread is not None and thread is not threading.current_thread():
            thread.join()
        with self._lock:
            if self._fd is not None:
                os.close(self._fd)
                self._fd = None

    def __enter__(self) -> "SerialPort":
        return self

    def __exit__(self, *exc_info) -> None:
        self.stop()

    def _require_fd(self) -> int:
        if self._fd is None:
            raise RuntimeError("no device is open")
        return self._fd

    def _start_receiving(self) -> None:
        if self._running.is_set():
            return
        self._running.set()
        self._thread = threading.Thread(
            target=self._receive_task,
            name=f"{type(self).__name__}-receive",
            daemon=True,
        )
        self._thread.start()

    @abstractmethod
    def _receive_task(self) -> None:
        """Loop while running, delivering received packets to the handler."""