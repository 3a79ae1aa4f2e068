"""FIFO buffers with bounds-checked reading and writing."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import Any


class BufferOverflowError(Exception):
    """Raised when an operation asks for more room or data than a buffer has."""


class Buffer(ABC):
    """Abstract FIFO buffer; subclasses provide storage."""

    def read(self, length: int) -> list[Any]:
        """Remove and return the ``length`` oldest elements."""
        data = self.peek(length)
        self.skip(length)
        return data

    def write(self, data: Iterable[Any]) -> None:
        """Append elements; raise BufferOverflowError if they do not fit."""
        if data is None:
            raise BufferOverflowError("write overflow: no data given")
        items = list(data)
        writable = self._writable()
        if len(items) > writable:
            raise BufferOverflowError(
                f"write overflow: {len(items)} elements, room for {writable}"
            )
        if items:
            self._write(items)

    def clear(self) -> None:
        """Discard all unread elements."""
        self._clear()

    def skip(self, size: int) -> None:
        """Discard the ``size`` oldest elements."""
        if size < 0:
            raise ValueError("size must not be negative")
        unread = len(self)
        if size > unread:
            raise BufferOverflowError(f"skip overflow: {size} elements, {unread} unread")
        if size:
            self._skip(size)

    def peek(self, length: int) -> list[Any]:
        """Return the ``length`` oldest elements without removing them."""
        if length < 0:
            raise ValueError("length must not be negative")
        unread = len(self)
        if length > unread:
            raise BufferOverflowError(f"peek overflow: {length} elements, {unread} unread")
        return self._peek(length) if length else []

    def __len__(self) -> int:
        return self._unread()

    @abstractmethod
    def _write(self, items: list[Any]) -> None: ...

    @abstractmethod
    def _peek(self, length: int) -> list[Any]: ...

    @abstractmethod
    def _skip(self, size: int) -> None: ...

    @abstractmethod
    def _clear(self) -> None: ...

    @abstractmethod
    def _writable(self) -> int: ...

    @abstractmethod
    def _unread(self) -> int: ...


class CyclicBuffer(Buffer):
    """Fixed-capacity ring buffer of arbitrary elements."""

    def __init__(self, size: int) -> None:
        if size <= 0:
            raise ValueError("size must be positive")
        self._size = size
        self._items: list[Any] = [None] * size
        self._read_pos = 0
        self._write_pos = 0
        self._full = False

    @property
    def capacity(self) -> int:
        """Total number of elements the buffer can hold."""
        return self._size

    def write_discard(self, data: Iterable[Any]) -> None:
        """Append elements, dropping the oldest ones to make room if needed."""
        items = list(data)
        if len(items) > self._size:
            raise BufferOverflowError(
                f"write overflow: {len(items)} elements exceed capacity {self._size}"
            )
        excess = len(items) - self._writable()
        if excess > 0:
            self._skip(excess)
        self.write(items)

    def write_empty(self, size: int) -> None:
        """Mark ``size`` slots as written, keeping whatever they already hold."""
        if size < 0:
            raise ValueError("size must not be negative")
        writable = self._writable()
        if size > writable:
            raise BufferOverflowError(f"write overflow: {size} elements, room for {writable}")
        if size:
            self._write_pos = (self._write_pos + size) % self._size
            self._full = self._write_pos == self._read_pos

    def align(self) -> None:
        """Move the unread elements so that they start at the front of storage."""
        items = self.read(len(self))
        self.clear()
        self.write(items)

    def is_full(self) -> bool:
        """Return True when no more elements can be written."""
        return self._full

    def writable(self) -> int:
        """Return how many elements can still be written."""
        return self._writable()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(size={self._size}, unread={len(self)})"

    def _write(self, items: list[Any]) -> None:
        for item in items:
            self._items[self._write_pos] = item
            self._write_pos = (self._write_pos + 1) % self._size
        self._full = self._write_pos == self._read_pos

    def _peek(self, length: int) -> list[Any]:
        return [self._items[(self._read_pos + offset) % self._size] for offset in range(length)]

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