"""Append-efficient message text.

A LogStr is an immutable rope: `a + b` allocates one node and never copies
either side, so building a message piecewise costs O(1) per append. The
text is flattened once, on first render, and cached.
"""

from typing import Any
from typing import Final

from pydantic import GetCoreSchemaHandler
from pydantic_core import CoreSchema
from pydantic_core import core_schema

_BYTES_ENCODING: Final[str] = "utf-8"


class LogStr:
    __slots__ = ("_leaf", "_left", "_right", "_rendered")

    def __init__(self, text: str = "") -> None:
        self._leaf: str | None = text
        self._left: LogStr | None = None
        self._right: LogStr | None = None
        self._rendered: str | None = text

    @classmethod
    def _concat(cls, left: "LogStr", right: "LogStr") -> "LogStr":
        node = cls.__new__(cls)
        node._leaf = None
        node._left = left
        node._right = right
        node._rendered = None
        return node

    def __add__(self, other: object) -> "LogStr":
        if isinstance(other, LogStr):
            right = other
        elif isinstance(other, (str, bytes)):
            right = log_str(other)
        else:
            return NotImplemented
        if right.is_empty():
            return self
        if self.is_empty():
            return right
        return LogStr._concat(self, right)

    def __radd__(self, other: object) -> "LogStr":
        if isinstance(other, (str, bytes)):
            return log_str(other) + self
        return NotImplemented

    def is_empty(self) -> bool:
        return self._leaf == ""

    def render(self) -> str:
        """Flatten the rope into a single string (cached after the first call)."""
        if self._rendered is not None:
            return self._rendered
        # Iterative in-order walk: ropes built by repeated appends are far deeper than the recursion limit.
        chunks: list[str] = []
        stack: list[LogStr] = [self]
        while stack:
            node = stack.pop()
            if node._rendered is not None:
                chunks.append(node._rendered)
                continue
            assert node._left is not None and node._right is not None
            stack.append(node._right)
            stack.append(node._left)
        self._rendered = "".join(chunks)
        return self._rendered

    def __str__(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        return f"LogStr({self.render()!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, LogStr):
            return self.render() == other.render()
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.render())

    @classmethod
    def __get_pydantic_core_schema__(
        cls,
        source_type: Any,
        handler: GetCoreSchemaHandler,
    ) -> CoreSchema:
        return core_schema.no_info_plain_validator_function(
            log_str,
            serialization=core_schema.plain_serializer_function_ser_schema(lambda value: value.render()),
        )


def log_str(value: object) -> LogStr:
    """Convert any text-like value into a LogStr.

    Strings are wrapped, bytes are decoded as UTF-8 (undecodable bytes are
    replaced), LogStr values pass through, and anything else goes through str().
    """
    if isinstance(value, LogStr):
        return value
    if isinstance(value, str):
        return LogStr(value)
    if isinstance(value, (bytes, bytearray)):
        return LogStr(bytes(value).decode(_BYTES_ENCODING, errors="replace"))
    return LogStr(str(value))


ls = log_str
