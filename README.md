# serialbridge

Send and receive framed packets over a UART or SPI device on Linux, plus two
fixed-capacity ring buffers (one of arbitrary elements, one of single bits).

Every packet sent is wrapped in a start barker (`0xAA 0xAA`) and an end
barker (`0xFF 0xFF`). On the UART receiving side the barkers are found again
and the complete payload goes to a handler you supply.

The device drivers use `termios` and `fcntl` and talk to Linux tty and
spidev device files, so they work on Linux only. The buffers and the framing
helpers work anywhere. There are no third-party dependencies.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Command line

```
serialbridge
```

This opens the UART at `/dev/ttyAMA0` at 115200 baud, prints every packet it
receives (its length and its bytes in hex), and every three seconds sends a
framed test payload of 510 counting bytes (0, 1, ..., 255, 0, 1, ...). It
runs until interrupted with Ctrl-C, then stops the receive thread and closes
the device.

Options:

- `--interface {uart,spi}` – which driver to use (default `uart`).
- `--device PATH` – device path; defaults to `/dev/ttyAMA0` for UART and
  `/dev/spidev0.0` for SPI.
- `--baud N` – baud rate for UART (default 115200) or clock in hertz for SPI
  (default 4 MHz).
- `--interval SECONDS` – pause between sends (default 3).
- `--count N` – stop after N sends instead of running until interrupted.

If the device cannot be opened or configured, or the baud rate is not
supported, the command prints `exception ...` to standard error and exits
with status 1.

## Library use

### UART

```python
from serialbridge.uart import UartInterface
from serialbridge.cli import format_packet

def on_packet(packet: bytes) -> None:
    print(format_packet(packet))

uart = UartInterface.instance()
uart.set_properties(UartInterface.UART_0, 115200, 0, 0, on_packet)
uart.transmit(b"Hello\r\n")   # sends AA AA 'Hello\r\n' FF FF
uart.stop()
```

`set_properties` opens the device raw 8N1 and starts a daemon thread that
reads from it and feeds what arrives to a `BarkerFramer`; each completed
payload is passed to the handler. The `mode` and `bits` arguments are
accepted but not used by the UART.

The supported baud rates are 9600, 19200, 38400, 57600, 115200 and 230400.
Any other rate raises `ValueError`; `baud_constant(rate)` gives the matching
termios constant.

Every port (`UartInterface` and `SpiInterface`) also offers:

- `transmit(data)` – send `data` between barkers; `True` if all was written.
- `receive(length)` – read up to `length` raw bytes.
- `stop()` – stop the receive thread and close the device. Ports are also
  context managers and call `stop()` on exit.
- `device_name`, `current_speed`, `is_running` and the assignable
  `rx_completed_handler`.

Using a port before `set_properties` has opened a device raises
`RuntimeError`.

### SPI

```python
from serialbridge.spi import SpiInterface, SpiSpeed

spi = SpiInterface.instance()
spi.set_properties(SpiInterface.SPI_0, SpiSpeed.SPEED_4_MHZ, 0, 8, on_packet)
received = spi.transfer(b"\x00" * 4, cs_change=False)
spi.stop()
```

`set_properties` sets the SPI mode, bits per word and maximum clock, then
starts a thread that every 10 ms clocks in 250 bytes and passes them to the
handler when the second byte is `0x55`. `transfer(tx, cs_change=False)` does
one full-duplex exchange and returns the bytes clocked in; an empty `tx`
raises `ValueError`. `SpiSpeed` lists common clocks from 125 kHz to 16 MHz.

### Framing without a device

```python
from serialbridge.serial import frame, BarkerFramer

frame(b"\x01\x02")            # b"\xaa\xaa\x01\x02\xff\xff"

framer = BarkerFramer()
framer.feed(b"\xaa\xaa\x01")  # None: start seen, end still awaited
framer.feed(b"\x02\xff\xff")  # b"\x01\x02"
```

Bytes outside a packet, including any after the end barker in the chunk
that completes one, are dropped. `collecting` tells whether a packet is
in progress and `reset()` drops it.

### Buffers

`CyclicBuffer(size)` is a fixed-capacity ring buffer of arbitrary elements.
It has `write`, `read`, `peek`, `skip`, `clear`, `write_discard` (drops the
oldest elements to make room), `write_empty` (advances the write position
without changing the stored values), `align`, `is_full`, `writable`,
`capacity` and `len()`. `read` and `peek` return lists.

```python
from serialbridge.buffer import CyclicBuffer

ring = CyclicBuffer(4)
ring.write("abc")
ring.read(2)        # ['a', 'b']
ring.write_discard("xyz")
ring.read(len(ring))  # ['c', 'x', 'y', 'z']
```

`CyclicBitBuffer(size, word_bits=8)` holds `size` single bits, packed least
significant bit first into words of `word_bits` bits. Its `read`, `write`,
`peek` and `skip` work on bits (0 or 1); `write_words` and `read_words` move
whole words and `unread_words()` counts them.

```python
from serialbridge.bit_buffer import CyclicBitBuffer

bits = CyclicBitBuffer(20)
bits.write_words([0xA5, 0x3C])
bits.read(4)        # [1, 0, 1, 0]
```

A write, read, peek or skip past a buffer's limits raises
`BufferOverflowError` (from `serialbridge.buffer`).

### Other helpers

- `serialbridge.singleton.Singleton` – base class whose `instance()` returns
  one shared object per subclass; copying it raises `TypeError`.
- `serialbridge.hello.Hello` – a shared greeter: set `name`, then
  `display_name()` prints `Hello from <name>` or `Name is empty!`.

## What it does not do

- UART packets carry no length field or checksum; a payload that itself
  contains `0xFF 0xFF` is cut short there.
- The SPI receive thread does not use barker framing; it only checks the
  `0x55` marker byte.
- There is no device discovery and no support for platforms other than
  Linux.