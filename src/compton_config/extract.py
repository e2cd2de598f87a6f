"""Scalar option extraction.

Each known option is one row of a table. A single loop looks the key up,
converts the value according to its kind and assigns it, leaving the
record untouched when the key is absent.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, Iterator, NamedTuple, Optional

from .document import Document
from .errors import InvalidEnumError, Outcome, SettingTypeError
from .logging import parse_log_level
from .options import (
    BACKEND_ALIASES,
    OPAQUE,
    ConfigurationRecord,
    normalize,
    parse_backend,
    parse_glx_swap_method,
    parse_vsync,
)


class Kind(enum.Enum):
    INT = "int"
    FLOAT = "float"
    OPACITY = "opacity"
    BOOL = "bool"
    STRING = "string"
    VSYNC = "vsync"
    BACKEND = "backend"
    GLX_SWAP_METHOD = "glx-swap-method"
    LOG_LEVEL = "log-level"


class ScalarOption(NamedTuple):
    key: str
    kind: Kind
    field: Optional[str] = None

    @property
    def attr(self) -> str:
        return self.field or self.key.replace("-", "_")


@dataclass
class LoadState:
    """Everything a load produces besides the record itself."""

    record: ConfigurationRecord
    log_level: Optional[int] = None
    blur_kern_has_negative: bool = False


CORE_OPTIONS = (
    ScalarOption("fade-delta", Kind.INT),
    ScalarOption("fade-in-step", Kind.OPACITY),
    ScalarOption("fade-out-step", Kind.OPACITY),
    ScalarOption("shadow-radius", Kind.INT),
    ScalarOption("shadow-opacity", Kind.FLOAT),
    ScalarOption("shadow-offset-x", Kind.INT),
    ScalarOption("shadow-offset-y", Kind.INT),
    ScalarOption("inactive-opacity", Kind.OPACITY),
    ScalarOption("active-opacity", Kind.OPACITY),
    ScalarOption("frame-opacity", Kind.FLOAT),
    ScalarOption("shadow", Kind.BOOL, "shadow_enable"),
    ScalarOption("fading", Kind.BOOL, "fading_enable"),
    ScalarOption("no-fading-openclose", Kind.BOOL),
    ScalarOption("no-fading-destroyed-argb", Kind.BOOL),
    ScalarOption("shadow-red", Kind.FLOAT),
    ScalarOption("shadow-green", Kind.FLOAT),
    ScalarOption("shadow-blue", Kind.FLOAT),
    ScalarOption("shadow-exclude-reg", Kind.STRING, "shadow_exclude_reg_str"),
    ScalarOption("inactive-opacity-override", Kind.BOOL),
    ScalarOption("inactive-dim", Kind.FLOAT),
    ScalarOption("mark-wmwin-focused", Kind.BOOL),
    ScalarOption("mark-ovredir-focused", Kind.BOOL),
    ScalarOption("shadow-ignore-shaped", Kind.BOOL),
    ScalarOption("detect-rounded-corners", Kind.BOOL),
    ScalarOption("xinerama-shadow-crop", Kind.BOOL),
    ScalarOption("detect-client-opacity", Kind.BOOL),
    ScalarOption("refresh-rate", Kind.INT),
    ScalarOption("vsync", Kind.VSYNC),
    ScalarOption("backend", Kind.BACKEND),
    ScalarOption("log-level", Kind.LOG_LEVEL),
    ScalarOption("sw-opti", Kind.BOOL),
    ScalarOption("use-ewmh-active-win", Kind.BOOL),
    ScalarOption("unredir-if-possible", Kind.BOOL),
    ScalarOption("unredir-if-possible-delay", Kind.INT),
    ScalarOption("inactive-dim-fixed", Kind.BOOL),
    ScalarOption("detect-transient", Kind.BOOL),
    ScalarOption("detect-client-leader", Kind.BOOL),
)

BLUR_OPTIONS = (
    ScalarOption("blur-background", Kind.BOOL),
    ScalarOption("blur-background-frame", Kind.BOOL),
    ScalarOption("blur-background-fixed", Kind.BOOL),
)

BACKEND_OPTIONS = (
    ScalarOption("resize-damage", Kind.INT),
    ScalarOption("glx-no-stencil", Kind.BOOL),
    ScalarOption("glx-no-rebind-pixmap", Kind.BOOL),
    ScalarOption("glx-swap-method", Kind.GLX_SWAP_METHOD),
    ScalarOption("glx-use-gpushader4", Kind.BOOL),
    ScalarOption("xrender-sync", Kind.BOOL),
    ScalarOption("xrender-sync-fence", Kind.BOOL),
)

SCALAR_OPTIONS = CORE_OPTIONS + BLUR_OPTIONS + BACKEND_OPTIONS

_READERS: Dict[Kind, Callable[[Document, str], Any]] = {
    Kind.INT: Document.lookup_int,
    Kind.FLOAT: Document.lookup_float,
    Kind.OPACITY: Document.lookup_float,
    Kind.BOOL: Document.lookup_bool,
    Kind.STRING: Document.lookup_string,
    Kind.VSYNC: Document.lookup_string,
    Kind.BACKEND: Document.lookup_string,
    Kind.GLX_SWAP_METHOD: Document.lookup_string,
    Kind.LOG_LEVEL: Document.lookup_string,
}

_ENUM_PARSERS: Dict[Kind, Callable[[str], Any]] = {
    Kind.VSYNC: parse_vsync,
    Kind.BACKEND: parse_backend,
    Kind.GLX_SWAP_METHOD: parse_glx_swap_method,
}

_ENUM_FAILURES = {
    Kind.VSYNC: "Cannot parse vsync",
    Kind.BACKEND: "Cannot parse backend",
    Kind.GLX_SWAP_METHOD: 'Cannot parse "glx-swap-method"',
}


def extract_option(document: Document, option: ScalarOption, state: LoadState) -> Iterator[Outcome]:
    """Apply a single option to ``state.record`` if the document sets it."""

    try:
        value = _READERS[option.kind](document, option.key)
    except SettingTypeError as exc:
        yield Outcome.warn(option.key, str(exc))
        return
    if value is None:
        return

    kind = option.kind
    if kind is Kind.OPACITY:
        value = int(normalize(value) * OPAQUE)
    elif kind in _ENUM_PARSERS:
        try:
            parsed = _ENUM_PARSERS[kind](value)
        except ValueError as exc:
            yield Outcome.fatal(option.key, f"{_ENUM_FAILURES[kind]}: {exc}", InvalidEnumError)
            return
        if kind is Kind.BACKEND and value.lower() in BACKEND_ALIASES:
            yield Outcome.warn(option.key, BACKEND_ALIASES[value.lower()])
        value = parsed
    elif kind is Kind.LOG_LEVEL:
        level = parse_log_level(value)
        if level is None:
            yield Outcome.warn(option.key, f"Invalid log level {value!r}, defaults to WARN")
            return
        state.log_level = level
        yield Outcome.ok(option.key)
        return

    setattr(state.record, option.attr, value)
    yield Outcome.ok(option.key)


def extract_scalars(
    document: Document, state: LoadState, options: Iterable[ScalarOption] = SCALAR_OPTIONS
) -> Iterator[Outcome]:
    for option in options:
        yield from extract_option(document, option, state)
