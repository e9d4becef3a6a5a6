from enum import IntEnum
from typing import Self


class Severity(IntEnum):
    """Criticality of a log item, ascending.

    The core forwards items of every severity to every scribe; suppressing
    low severities is up to each scribe.
    """

    DEBUG = 0
    INFO = 1
    NOTICE = 2
    WARNING = 3
    ERROR = 4
    CRITICAL = 5
    ALERT = 6
    EMERGENCY = 7

    def render(self) -> str:
        """Canonical capitalized name, used both for display and as the JSON value."""
        return self.name.capitalize()

    @classmethod
    def parse(cls, text: str) -> Self:
        """Inverse of render(); case-insensitive."""
        try:
            return cls[text.strip().upper()]
        except KeyError as e:
            raise ValueError(f"Unknown severity: {text!r}") from e


class Verbosity(IntEnum):
    """How much of a payload a scribe serializes.

    V0 means no payload fields, V3 means every field. What V1 and V2 keep is
    decided by each payload type.
    """

    V0 = 0
    V1 = 1
    V2 = 2
    V3 = 3
