import os
import queue
import select
import termios
import time

import pytest

from serialbridge.serial import frame
from serialbridge.uart import UartInterface, baud_constant


@pytest.fixture
def pty_pair():
    master, slave = os.openpty()
    yield master, os.ttyname(slave)
    os.close(master)
    os.close(slave)


@pytest.fixture
def uart():
    port = UartInterface()
    yield port
    port.stop()


def _read_exactly(fd, length, timeout=2.0):
    data = b""
    deadline = time.monotonic() + timeout
    while len(data) < length and time.monotonic() < deadline:
        ready, _, _ = select.select([fd], [], [], 0.05)
        if ready:
            data += os.read(fd, length - len(data))
    return data


@pytest.mark.parametrize(
    "rate, constant",
    [
        (9600, termios.B9600),
        (19200, termios.B19200),
        (38400, termios.B38400),
        (57600, termios.B57600),
        (115200, termios.B115200),
        (230400, termios.B230400),
    ],
)
def test_baud_constant_supported(rate, constant):
    assert baud_constant(rate) == constant


@pytest.mark.parametrize("rate", [0, 4800, 12345, 921600])
def test_baud_constant_unsupported(rate):
    with pytest.raises(ValueError, match="Unsupported baud rate"):
        baud_constant(rate)


def test_instance_is_shared():
    first = UartInterface.instance()
    second = UartInterface.instance()
    assert second is first
    assert UartInterface() is not first


def test_unsupported_baud_raises_without_starting(uart, pty_pair):
    _, name = pty_pair
    with pytest.raises(ValueError):
        uart.set_properties(name, 1234, 0, 0, None)
    assert uart.is_running is False


def test_missing_device_raises(uart, tmp_path):
    with pytest.raises(OSError):
        uart.set_properties(str(tmp_path / "missing"), 115200, 0, 0, None)
    assert uart.is_running is False


def test_non_tty_device_raises(uart, tmp_path):
    plain = tmp_path / "plain"
    plain.write_bytes(b"")
    with pytest.raises(OSError):
        uart.set_properties(str(plain), 115200, 0, 0, None)
    assert uart.is_running is False


def test_configures_raw_8n1(uart, pty_pair):
    master, name = pty_pair
    uart.set_properties(name, 115200, 0, 0, None)
    attrs = termios.tcgetattr(master)
    cflag = attrs[2]
    assert attrs[4] == termios.B115200
    assert attrs[5] == termios.B115200
    assert cflag & termios.CSIZE == termios.CS8
    assert cflag & termios.PARENB == 0
    assert cflag & termios.CSTOPB == 0
    assert attrs[3] == 0
    assert uart.device_name == name
    assert uart.current_speed == 115200
    assert uart.is_running is True


def test_receives_framed_packet(uart, pty_pair):
    master, name = pty_pair
    received = queue.Queue()
    uart.set_properties(name, 115200, 0, 0, received.put)
    os.write(master, frame(b"\x01\x02\x03"))
    assert received.get(timeout=2) == b"\x01\x02\x03"


def test_receives_sequential_packets(uart, pty_pair):
    master, name = pty_pair
    received = queue.Queue()
    uart.set_properties(name, 57600, 0, 0, received.put)
    os.write(master, frame(b"first"))
    assert received.get(timeout=2) == b"first"
    os.write(master, frame(b"second"))
    assert received.get(timeout=2) == b"second"


def test_transmit_sends_framed_bytes(uart, pty_pair):
    master, name = pty_pair
    uart.set_properties(name, 115200, 0, 0, None)
    payload = bytes(range(20))
    assert uart.transmit(payload) is True
    expected = frame(payload)
    assert _read_exactly(master, len(expected)) == expected


def test_stop_ends_receiving(uart, pty_pair):
    _, name = pty_pair
    uart.set_properties(name, 9600, 0, 0, None)
    assert uart.is_running is True
    uart.stop()
    assert uart.is_running is False
    with pytest.raises(RuntimeError):
        uart.transmit(b"\x01")