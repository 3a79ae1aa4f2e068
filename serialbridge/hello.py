"""A shared greeter that announces its configured name."""

from __future__ import annotations

from .singleton import Singleton


class Hello(Singleton):
    """Greeter holding a single name shared across the program."""

    def __init__(self) -> None:
        self.name = ""

    def display_name(self) -> None:
        """Print a greeting, or a notice when no name is set."""
        if self.name:
            print(f"Hello from {self.name}")
        else:
            print("Name is empty!")