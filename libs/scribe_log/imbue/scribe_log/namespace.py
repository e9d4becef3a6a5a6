"""Composable, path-like labels attached to log items.

Namespaces form a monoid under concatenation: `Namespace.root()` is the
identity and `a + (b + c) == (a + b) + c`. Segment order is significant.
"""

from typing import Final
from typing import Self

from pydantic import Field

from imbue.scribe_log.frozen_model import FrozenModel
from imbue.scribe_log.pure import pure

NAMESPACE_SEPARATOR: Final[str] = "."


class Namespace(FrozenModel):
    """Ordered sequence of name segments."""

    segments: tuple[str, ...] = Field(default=(), description="Name segments, outermost first")

    @classmethod
    def root(cls) -> Self:
        """The empty namespace (identity of concatenation)."""
        return cls()

    @classmethod
    def of(cls, text: str) -> Self:
        """Build a single-segment namespace from a string literal.

        The text is not split on the separator: `Namespace.of("a.b")` has one segment.
        """
        return cls(segments=(text,))

    def __add__(self, other: "Namespace") -> "Namespace":
        if not isinstance(other, Namespace):
            return NotImplemented
        if not other.segments:
            return self
        if not self.segments:
            return other
        return Namespace(segments=self.segments + other.segments)

    def __len__(self) -> int:
        return len(self.segments)

    def __str__(self) -> str:
        return self.render()

    def render(self) -> str:
        """Join the segments with the separator for display."""
        return NAMESPACE_SEPARATOR.join(self.segments)

    def intercalate(self) -> list[str]:
        """Segments interleaved with separator entries, ready for piecewise emission."""
        result: list[str] = []
        for index, segment in enumerate(self.segments):
            if index:
                result.append(NAMESPACE_SEPARATOR)
            result.append(segment)
        return result


@pure
def namespace(*segments: str) -> Namespace:
    """Shorthand for `Namespace(segments=segments)`."""
    return Namespace(segments=segments)
