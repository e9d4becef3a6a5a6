"""Scribes: sinks that consume items.

A scribe is any ScribeInterface with a push(item) method. Scribes compose
associatively: NullScribe is the identity and CompositeScribe pushes to its
first operand and then its second, synchronously, in the same call.
"""

from abc import ABC
from abc import abstractmethod
from collections.abc import Callable
from functools import reduce
from typing import Any

from loguru import logger
from pydantic import Field

from imbue.scribe_log.item import Item
from imbue.scribe_log.mutable_model import MutableModel


class ScribeInterface(MutableModel, ABC):
    """Consumes items of any payload type and performs a side effect.

    push must accept any Item whose payload satisfies LogContext. Errors
    raised by push propagate to whoever emitted the item; a scribe that must
    not fail its callers should wrap itself in FaultIsolatingScribe.
    """

    @abstractmethod
    def push(self, item: Item[Any]) -> None: ...

    def __add__(self, other: "ScribeInterface") -> "ScribeInterface":
        if not isinstance(other, ScribeInterface):
            return NotImplemented
        return combine_scribes(self, other)


class NullScribe(ScribeInterface):
    """Identity scribe: push does nothing."""

    def push(self, item: Item[Any]) -> None:
        return None


class CompositeScribe(ScribeInterface):
    """Pushes every item to `first`, then to `second`."""

    first: ScribeInterface = Field(description="Scribe pushed to first")
    second: ScribeInterface = Field(description="Scribe pushed to after first returns")

    def push(self, item: Item[Any]) -> None:
        self.first.push(item)
        self.second.push(item)


class FunctionScribe(ScribeInterface):
    """Adapts a plain callable into a scribe."""

    func: Callable[[Item[Any]], None] = Field(description="Called once per item")

    def push(self, item: Item[Any]) -> None:
        self.func(item)


class FaultIsolatingScribe(ScribeInterface):
    """Wraps a scribe so its failures are reported through loguru and dropped.

    Dispatch stops at the first scribe that raises. Registering the wrapped
    scribe instead lets the remaining scribes (and the caller) carry on.
    """

    inner: ScribeInterface = Field(description="Scribe whose failures are isolated")
    description: str = Field(default="scribe", description="Label used when reporting a failure")

    def push(self, item: Item[Any]) -> None:
        try:
            self.inner.push(item)
        except Exception as e:
            logger.opt(exception=e).warning(
                "Dropped log item in {} after push failed: {}",
                self.description,
                e,
            )


def _combine_pair(first: ScribeInterface, second: ScribeInterface) -> ScribeInterface:
    if isinstance(first, NullScribe):
        return second
    if isinstance(second, NullScribe):
        return first
    return CompositeScribe(first=first, second=second)


def combine_scribes(*scribes: ScribeInterface) -> ScribeInterface:
    """Combine scribes into one that pushes to each of them in argument order.

    With no arguments this is the NullScribe.
    """
    return reduce(_combine_pair, scribes, NullScribe())


def make_scribe(func: Callable[[Item[Any]], None]) -> FunctionScribe:
    """Shorthand for `FunctionScribe(func=func)`."""
    return FunctionScribe(func=func)
