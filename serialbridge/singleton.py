"""A per-class shared instance mixin."""

from __future__ import annotations

import threading
from typing import Any, ClassVar, TypeVar

_T = TypeVar("_T", bound="Singleton")


class Singleton:
    """Base class giving each subclass exactly one lazily created instance.

    Instances cannot be copied: the shared object is the only one that
    ``instance()`` ever hands out.
    """

    _instances: ClassVar[dict[type, Any]] = {}
    _lock: ClassVar[threading.Lock] = threading.Lock()

    @classmethod
    def instance(cls: type[_T]) -> _T:
        """Return the shared instance of this class, creating it on first use."""
        existing = Singleton._instances.get(cls)
        if existing is not None:
            return existing
        with Singleton._lock:
            existing = Singleton._instances.get(cls)
            if existing is None:
                existing = cls()
                Singleton._instances[cls] = existing
            return existing

    def __copy__(self) -> Any:
        raise TypeError(f"{type(self).__name__} is a singleton and cannot be copied")

    def __deepcopy__(self, memo: dict[int, Any]) -> Any:
        raise TypeError(f"{type(self).__name__} is a singleton and cannot be copied")