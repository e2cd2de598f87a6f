"""Window condition patterns.

The matching language itself belongs to the compositor. The loader only
needs something that turns a pattern string into a :class:`PatternEntry`
or rejects it, so callers may plug in a real compiler through any callable
matching :class:`PatternParser`. The default :func:`parse_pattern` performs
a structural check and defers compilation.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Protocol


class PatternParseError(ValueError):
    """Raised when a pattern string cannot be parsed."""


@dataclass(frozen=True)
class PatternEntry:
    """A condition pattern; ``compiled`` is ``None`` until a matcher compiles it."""

    text: str
    compiled: Optional[Any] = None


class PatternParser(Protocol):
    def __call__(self, text: str) -> PatternEntry:
        ...


_QUOTES = {"'", '"'}


def parse_pattern(text: str) -> PatternEntry:
    """Validate ``text`` structurally and return a deferred entry.

    Rejects blank patterns, unterminated quoted strings and unbalanced
    parentheses. Backslash escapes inside quotes are honoured.
    """

    if not isinstance(text, str):
        raise PatternParseError(f"Pattern must be a string, got {type(text).__name__}")
    stripped = text.strip()
    if not stripped:
        raise PatternParseError("Empty pattern")

    depth = 0
    quote: Optional[str] = None
    escaped = False
    for char in stripped:
        if quote is not None:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == quote:
                quote = None
            continue
        if char in _QUOTES:
            quote = char
        elif char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth < 0:
                raise PatternParseError(f"Unmatched ')' in pattern: {text}")
    if quote is not None:
        raise PatternParseError(f"Unterminated string in pattern: {text}")
    if depth:
        raise PatternParseError(f"Unmatched '(' in pattern: {text}")
    return PatternEntry(stripped)
