"""A ring buffer addressed bit by bit, packed into fixed-width words."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from .buffer import Buffer, BufferOverflowError


class CyclicBitBuffer(Buffer):
    """Fixed-capacity ring buffer of single bits.

    The elements handled by ``read``, ``write``, ``peek`` and ``skip`` are bits
    (0 or 1). Storage is a row of ``word_bits``-wide words, filled from the
    least significant bit upwards; the capacity need not be a whole number of
    words. ``write_words`` and ``read_words`` move whole words at a time, also
    least significant bit first.
    """

    def __init__(self, size: int, word_bits: int = 8) -> None:
        if size <= 0:
            raise ValueError("size must be positive")
        if word_bits <= 0:
            raise ValueError("word_bits must be positive")
        self._size = size
        self._word_bits = word_bits
        self._words = [0] * -(-size // word_bits)
        self._read_pos = 0
        self._write_pos = 0
        self._full = False

    @property
    def capacity(self) -> int:
        """Total number of bits the buffer can hold."""
        return self._size

    @property
    def word_bits(self) -> int:
        """Width in bits of one storage word."""
        return self._word_bits

    @property
    def raw_words(self) -> tuple[int, ...]:
        """The storage words as they currently stand."""
        return tuple(self._words)

    def is_full(self) -> bool:
        """Return True when no more bits can be written."""
        return self._full

    def writable(self) -> int:
        """Return how many bits can still be written."""
        return self._writable()

    def write_words(self, words: Iterable[int]) -> None:
        """Append whole words, each least significant bit first."""
        values = list(words)
        limit = 1 << self._word_bits
        for value in values:
            if not 0 <= value < limit:
                raise ValueError(f"word {value!r} does not fit in {self._word_bits} bits")
        room = self._writable() // self._word_bits
        if len(values) > room:
            raise BufferOverflowError(
                f"write overflow: {len(values)} words, room for {room}"
            )
        self.write(
            (value >> shift) & 1 for value in values for shift in range(self._word_bits)
        )

    def read_words(self, count: int) -> list[int]:
        """Remove and return ``count`` whole words."""
        if count < 0:
            raise ValueError("count must not be negative")
        bits = self.read(count * self._word_bits)
        return [
            sum(bit << shift for shift, bit in enumerate(bits[start : start + self._word_bits]))
            for start in range(0, len(bits), self._word_bits)
        ]

    def unread_words(self) -> int:
        """Return how many whole words are waiting to be read."""
        return len(self) // self._word_bits

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(size={self._size}, word_bits={self._word_bits}, "
            f"unread={len(self)})"
        )

    def _get_bit(self, position: int) -> int:
        word, offset = divmod(position, self._word_bits)
        return (self._words[word] >> offset) & 1

    def _set_bit(self, position: int, bit: int) -> None:
        word, offset = divmod(position, self._word_bits)
        if bit:
            self._words[word] |= 1 << offset
        else:
            self._words[word] &= ~(1 << offset)

    def _write(self, items: list[Any]) -> None:
        for item in items:
            if item not in (0, 1):
                raise ValueError(f"bit must be 0 or 1, got {item!r}")
        for item in items:
            self._set_bit(self._write_pos, int(item))
            self._write_pos = (self._write_pos + 1) % self._size
        self._full = self._write_pos == self._read_pos

    def _peek(self, length: int) -> list[Any]:
        return [
            self._get_bit((self._read_pos + offset) % self._size) for offset in range(length)
        ]

    def _skip(self, size: int) -> None:
        self._read_pos = (self._read_pos + size) % self._size
        self._full = False

    def _clear(self) -> None:
        self._read_pos = 0
        self._write_pos = 0
        self._full = False

    def _writable(self) -> int:
        return self._size - self._unread()

    def _unread(self) -> int:
        if self._full:
            return self._size
        return (self._write_pos - self._read_pos) % self._size