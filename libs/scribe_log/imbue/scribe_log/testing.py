"""Scribes for exercising dispatch in tests."""

import threading
import time
from collections.abc import Callable
from typing import Any

from pydantic import Field
from pydantic import PrivateAttr

from imbue.scribe_log.item import Item
from imbue.scribe_log.scribe import ScribeInterface


class ScribeFailure(RuntimeError):
    """Raised by FailingScribe."""


class CapturingScribe(ScribeInterface):
    """Records every pushed item, in push order. Safe to push to from several threads."""

    items: list[Item[Any]] = Field(default_factory=list)
    _lock: threading.Lock = PrivateAttr(default_factory=threading.Lock)

    def push(self, item: Item[Any]) -> None:
        with self._lock:
            self.items.append(item)


class FailingScribe(ScribeInterface):
    """Raises ScribeFailure on every push."""

    def push(self, item: Item[Any]) -> None:
        raise ScribeFailure(f"push failed for {item.message}")


def poll_until(
    condition: Callable[[], bool],
    timeout: float = 5.0,
    poll_interval: float = 0.01,
) -> bool:
    """Poll until a condition becomes true or timeout expires.

    Returns True if the condition was met, False if timeout occurred.
    """
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if condition():
            return True
        time.sleep(poll_interval)
    return condition()
