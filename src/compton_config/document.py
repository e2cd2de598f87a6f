"""Parsed configuration document.

Thin wrapper over :mod:`libconf`. Lookups take dotted paths
(``wintypes.dock``) and follow libconfig's auto-conversion rules: integer
and float settings are interchangeable, booleans and strings are not.
"""

from __future__ import annotations

import os
import re
from typing import Any, Mapping, Optional, TextIO

import libconf

from .errors import DocumentSyntaxError, SettingTypeError

_MISSING = object()

# libconf reports positions either as "at row N, column M" or "'file':N:M".
_LINE_RE = re.compile(r"(?:at row |':)(\d+)(?:, column |:)\d+")


def _error_line(message: str) -> Optional[int]:
    match = _LINE_RE.search(message)
    return int(match.group(1)) if match else None


def parse(stream: TextIO, resolved_path: str) -> "Document":
    """Parse ``stream`` into a :class:`Document`.

    ``@include`` directives resolve relative to the directory holding
    ``resolved_path``.
    """

    include_dir = os.path.dirname(resolved_path)
    try:
        tree = libconf.load(stream, filename=resolved_path, includedir=include_dir)
    except libconf.ConfigParseError as exc:
        message = str(exc)
        raise DocumentSyntaxError(resolved_path, _error_line(message), message) from exc
    except UnicodeDecodeError as exc:
        raise DocumentSyntaxError(resolved_path, None, f"Invalid UTF-8 data: {exc}") from exc
    except OSError as exc:
        raise DocumentSyntaxError(resolved_path, None, f"Cannot read include: {exc}") from exc
    return Document(tree, resolved_path)


def loads(text: str, path: str = "<string>") -> "Document":
    """Parse a configuration held in memory."""

    try:
        tree = libconf.loads(text, filename=path)
    except libconf.ConfigParseError as exc:
        message = str(exc)
        raise DocumentSyntaxError(path, _error_line(message), message) from exc
    return Document(tree, path)


class Document:
    """A parsed libconfig group."""

    def __init__(self, tree: Mapping[str, Any], path: str, prefix: str = "") -> None:
        self._tree = tree
        self.path = path
        self._prefix = prefix

    def __repr__(self) -> str:
        return f"Document(path={self.path!r}, prefix={self._prefix!r})"

    def _full_key(self, key: str) -> str:
        return f"{self._prefix}{key}"

    def _get(self, key: str) -> Any:
        node: Any = self._tree
        for part in key.split("."):
            if not isinstance(node, Mapping) or part not in node:
                return _MISSING
            node = node[part]
        return node

    def contains(self, key: str) -> bool:
        return self._get(key) is not _MISSING

    def lookup(self, key: str) -> Optional[Any]:
        """Return the raw setting at ``key`` or ``None`` when absent."""

        value = self._get(key)
        return None if value is _MISSING else value

    def lookup_int(self, key: str) -> Optional[int]:
        value = self._get(key)
        if value is _MISSING:
            return None
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise SettingTypeError(self._full_key(key), "an integer", value)
        return int(value)

    def lookup_float(self, key: str) -> Optional[float]:
        value = self._get(key)
        if value is _MISSING:
            return None
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise SettingTypeError(self._full_key(key), "a number", value)
        return float(value)

    def lookup_bool(self, key: str) -> Optional[bool]:
        value = self._get(key)
        if value is _MISSING:
            return None
        if not isinstance(value, bool):
            raise SettingTypeError(self._full_key(key), "a boolean", value)
        return value

    def lookup_string(self, key: str) -> Optional[str]:
        value = self._get(key)
        if value is _MISSING:
            return None
        if not isinstance(value, str):
            raise SettingTypeError(self._full_key(key), "a string", value)
        return value

    def section(self, key: str) -> Optional["Document"]:
        """Return the group at ``key`` as a document of its own."""

        value = self._get(key)
        if value is _MISSING:
            return None
        if not isinstance(value, Mapping):
            raise SettingTypeError(self._full_key(key), "a group", value)
        return Document(value, self.path, prefix=f"{self._full_key(key)}.")
