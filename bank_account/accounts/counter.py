"""
Live Instance Counter

Counts ValidatedAccount instances that have been constructed and not
yet released. The composition root (AccountBook) owns one explicitly;
DEFAULT_COUNTER serves accounts built without one.
"""

import threading


class LiveInstanceCounter:
    """Thread-safe count of live accounts. Never goes negative."""

    def __init__(self) -> None:
        self._value = 0
        self._lock = threading.Lock()

    @property
    def value(self) -> int:
        return self._value

    def increment(self) -> int:
        with self._lock:
            self._value += 1
            return self._value

    def decrement(self) -> int:
        with self._lock:
            if self._value == 0:
                raise RuntimeError("live instance counter underflow")
            self._value -= 1
            return self._value

    def __int__(self) -> int:
        return self._value

    def __repr__(self) -> str:
        return f"LiveInstanceCounter(value={self._value})"


DEFAULT_COUNTER = LiveInstanceCounter()
