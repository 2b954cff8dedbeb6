from typing import Any


class ConversionError(ValueError):
    """Raised when a value cannot be interpreted as an instant."""

    def __init__(self, value: Any, reason: str | None = None) -> None:
        self.value = value
        message = f"Cannot convert {value!r} to a timestamp"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class TstzRangeConfigurationError(RuntimeError):
    """Raised when a model or column cannot carry tstzrange accessors."""
