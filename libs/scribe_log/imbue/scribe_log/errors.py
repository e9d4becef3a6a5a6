class BaseScribeLogError(Exception):
    """Base exception for all scribe_log errors."""


class ConfigError(BaseScribeLogError, ValueError):
    """Raised when logging configuration cannot be parsed."""

    def __init__(self, variable_name: str, raw_value: str, reason: str) -> None:
        self.variable_name = variable_name
        self.raw_value = raw_value
        super().__init__(f"Invalid value for {variable_name}: {raw_value!r} ({reason})")
