"""Barker-framed UART and SPI links with cyclic element and bit buffers."""

__version__ = "0.1.0"