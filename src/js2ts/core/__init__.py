"""Core abstractions shared across js2ts."""

from js2ts.core.errors import (
    ConfigurationError,
    Js2TsError,
    ParsingError,
)

__all__ = [
    "ConfigurationError",
    "Js2TsError",
    "ParsingError",
]
