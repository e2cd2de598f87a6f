"""Error types and extraction outcomes for configuration loading."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Optional


class ConfigError(Exception):
    """Base class for configuration loading errors."""


class DocumentSyntaxError(ConfigError):
    """Raised when the configuration document cannot be parsed."""

    def __init__(self, path: str, line: Optional[int], message: str) -> None:
        self.path = path
        self.line = line
        self.message = message
        if line is None:
            super().__init__(f"{path}: {message}")
        else:
            super().__init__(f"{path}, line {line}: {message}")


class SettingTypeError(ConfigError):
    """Raised when a setting exists but holds a value of the wrong type."""

    def __init__(self, key: str, expected: str, value: Any) -> None:
        self.key = key
        self.expected = expected
        self.value = value
        super().__init__(
            f"Option `{key}` expects {expected}, got {type(value).__name__}; ignoring it."
        )


class FatalConfigError(ConfigError):
    """A configuration problem that must stop the application."""

    def __init__(self, message: str, key: Optional[str] = None) -> None:
        self.key = key
        super().__init__(message)


class UnreadableConfigError(FatalConfigError):
    """An explicitly requested configuration file could not be opened."""


class InvalidEnumError(FatalConfigError):
    """An enumerated option holds a value no classifier recognises."""


class InvalidRuleError(FatalConfigError):
    """An opacity rule or blur kernel specification is malformed."""


class Severity(enum.Enum):
    OK = "ok"
    WARN = "warn"
    FATAL = "fatal"


@dataclass(frozen=True)
class Outcome:
    """Result of one extraction step.

    Steps yield outcomes instead of logging or exiting themselves, so the
    pipeline driver decides what a warning or a fatal condition means.
    """

    severity: Severity
    key: Optional[str] = None
    message: str = ""
    fatal_type: type = FatalConfigError

    @classmethod
    def ok(cls, key: Optional[str] = None) -> "Outcome":
        return cls(Severity.OK, key)

    @classmethod
    def warn(cls, key: Optional[str], message: str) -> "Outcome":
        return cls(Severity.WARN, key, message)

    @classmethod
    def fatal(
        cls, key: Optional[str], message: str, fatal_type: type = FatalConfigError
    ) -> "Outcome":
        return cls(Severity.FATAL, key, message, fatal_type)

    @property
    def is_warning(self) -> bool:
        return self.severity is Severity.WARN

    @property
    def is_fatal(self) -> bool:
        return self.severity is Severity.FATAL

    def to_exception(self) -> FatalConfigError:
        return self.fatal_type(self.message, key=self.key)
