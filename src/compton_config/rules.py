"""Condition lists, opacity rules and blur kernels."""

from __future__ import annotations

import re
from typing import Any, Iterator, List, Optional, Sequence, Tuple

from .document import Document
from .errors import InvalidRuleError, Outcome, SettingTypeError
from .options import MAX_BLUR_PASS, BlurKernel, OpacityRule, read_integer
from .patterns import PatternEntry, PatternParseError, PatternParser, parse_pattern

# Condition list keys and the record attribute each one fills.
CONDITION_LISTS: Tuple[Tuple[str, str], ...] = (
    ("shadow-exclude", "shadow_blacklist"),
    ("fade-exclude", "fade_blacklist"),
    ("focus-exclude", "focus_blacklist"),
    ("invert-color-include", "invert_color_list"),
    ("blur-background-exclude", "blur_background_blacklist"),
)
UNREDIR_CONDITION_LIST = ("unredir-if-possible-exclude", "unredir_if_possible_blacklist")

MAX_KERNEL_DIMENSION = 16


def _box(size: int) -> str:
    return ",".join([str(size), str(size)] + ["1"] * (size * size - 1))


PREDEFINED_KERNELS = {
    "3x3box": _box(3),
    "5x5box": _box(5),
    "7x7box": _box(7),
    "3x3gaussian": (
        "3,3,0.243117,0.493069,0.243117,0.493069,0.493069,0.243117,0.493069,0.243117"
    ),
    "5x5gaussian": (
        "5,5,0.003493,0.029143,0.059106,0.029143,0.003493,0.029143,0.243117,"
        "0.493069,0.243117,0.029143,0.059106,0.493069,0.493069,0.059106,0.029143,"
        "0.243117,0.493069,0.243117,0.029143,0.003493,0.029143,0.059106,0.029143,"
        "0.003493"
    ),
}


def _elements(document: Document, key: str) -> Tuple[List[Any], List[Outcome]]:
    value = document.lookup(key)
    if value is None:
        return [], []
    if isinstance(value, str):
        return [value], []
    if isinstance(value, (list, tuple)):
        return list(value), []
    error = SettingTypeError(key, "a string or an array of strings", value)
    return [], [Outcome.warn(key, str(error))]


def parse_condition_list(
    document: Document, key: str, pattern_parser: PatternParser = parse_pattern
) -> Tuple[List[PatternEntry], List[Outcome]]:
    """Parse a condition list given as one string or an array of strings.

    Patterns the parser rejects are dropped with a warning.
    """

    elements, outcomes = _elements(document, key)
    entries: List[PatternEntry] = []
    for index, element in enumerate(elements):
        if not isinstance(element, str):
            outcomes.append(Outcome.warn(key, f"Entry {index} of `{key}` is not a string; dropped."))
            continue
        try:
            entries.append(pattern_parser(element))
        except PatternParseError as exc:
            outcomes.append(Outcome.warn(key, f"Dropping pattern {element!r} in `{key}`: {exc}"))
    return entries, outcomes


def parse_opacity_rule(text: str, pattern_parser: PatternParser = parse_pattern) -> OpacityRule:
    """Parse ``OPACITY:PATTERN`` where OPACITY is an integer percentage."""

    parsed = read_integer(text)
    if parsed is None:
        raise ValueError(f"No opacity specified: {text}")
    opacity, end = parsed
    if opacity > 100 or opacity < 0:
        raise ValueError(f"Opacity {opacity} invalid: {text}")
    rest = text[end:].lstrip()
    if not rest.startswith(":"):
        raise ValueError(f"Opacity terminator not found: {text}")
    try:
        pattern = pattern_parser(rest[1:])
    except PatternParseError as exc:
        raise ValueError(f"Bad pattern in opacity rule {text!r}: {exc}") from exc
    return OpacityRule(opacity, pattern)


def parse_opacity_rules(
    document: Document, key: str, pattern_parser: PatternParser = parse_pattern
) -> Tuple[List[OpacityRule], List[Outcome]]:
    """Parse opacity rules; the first malformed entry yields a fatal outcome."""

    elements, outcomes = _elements(document, key)
    rules: List[OpacityRule] = []
    for element in elements:
        if not isinstance(element, str):
            outcomes.append(
                Outcome.fatal(key, f"Opacity rule {element!r} is not a string", InvalidRuleError)
            )
            break
        try:
            rules.append(parse_opacity_rule(element, pattern_parser))
        except ValueError as exc:
            outcomes.append(Outcome.fatal(key, str(exc), InvalidRuleError))
            break
    return rules, outcomes


_NUMBER = re.compile(r"\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")
_SEPARATORS = re.compile(r"[\s,]*")


def _read_number(src: str, pos: int) -> Tuple[float, int]:
    match = _NUMBER.match(src, pos)
    if not match:
        raise ValueError(f"No number found: {src[pos:]}")
    end = _SEPARATORS.match(src, match.end()).end()
    return float(match.group(1)), end


def _parse_kernel(src: str, pos: int) -> Tuple[BlurKernel, int, List[str]]:
    warnings: List[str] = []
    value, pos = _read_number(src, pos)
    width = int(value)
    value, pos = _read_number(src, pos)
    height = int(value)
    if width <= 0 or height <= 0:
        raise ValueError("Blur kernel width/height can't be negative.")
    if not (width % 2 and height % 2):
        raise ValueError("Blur kernel width/height must be odd.")
    if width > MAX_KERNEL_DIMENSION or height > MAX_KERNEL_DIMENSION:
        warnings.append(
            "Blur kernel width/height too large, may slow down rendering, "
            "and/or consume lots of memory"
        )

    centre = height // 2 * width + width // 2
    weights: List[float] = []
    for index in range(width * height):
        if index == centre:
            weights.append(0.0)
            continue
        value, pos = _read_number(src, pos)
        weights.append(value)

    while pos < len(src) and src[pos] != ";":
        if not src[pos].isspace() and src[pos] != ",":
            raise ValueError("Trailing characters in blur kernel string.")
        pos += 1
    if pos < len(src):
        pos += 1
        while pos < len(src) and src[pos].isspace():
            pos += 1
    return BlurKernel(width, height, tuple(weights)), pos, warnings


def parse_blur_kern(
    text: str, max_kernels: int = MAX_BLUR_PASS
) -> Tuple[List[BlurKernel], bool, List[str]]:
    """Parse a blur kernel list or the name of a predefined kernel.

    Returns the kernels, whether any weight is negative, and warnings.
    Raises :class:`ValueError` on malformed input.
    """

    if text in PREDEFINED_KERNELS:
        return parse_blur_kern(PREDEFINED_KERNELS[text], max_kernels)

    kernels: List[BlurKernel] = []
    warnings: List[str] = []
    pos = 0
    while pos < len(text) and len(kernels) < max_kernels:
        kernel, pos, kernel_warnings = _parse_kernel(text, pos)
        kernels.append(kernel)
        warnings.extend(kernel_warnings)

    if len(kernels) > 1:
        warnings.append(
            "You are seeing this message because you are using multipass blur. "
            "Please report an issue to us so we know multipass blur is actually "
            "been used. Otherwise it might be removed in future releases"
        )
    if pos < len(text):
        raise ValueError("Too many blur kernels!")
    has_negative = any(kernel.has_negative for kernel in kernels)
    return kernels, has_negative, warnings


def blur_kern_outcomes(
    document: Document, key: str
) -> Tuple[Optional[Tuple[List[BlurKernel], bool]], List[Outcome]]:
    """Read ``key`` as a blur kernel string; malformed kernels are fatal."""

    try:
        text = document.lookup_string(key)
    except SettingTypeError as exc:
        return None, [Outcome.warn(key, str(exc))]
    if text is None:
        return None, []
    try:
        kernels, has_negative, warnings = parse_blur_kern(text)
    except ValueError as exc:
        return None, [Outcome.fatal(key, f'Cannot parse "{key}": {exc}', InvalidRuleError)]
    outcomes = [Outcome.warn(key, message) for message in warnings]
    return (kernels, has_negative), outcomes


def iter_condition_lists(
    document: Document, record: Any, lists: Sequence[Tuple[str, str]], pattern_parser: PatternParser
) -> Iterator[Outcome]:
    for key, attr in lists:
        entries, outcomes = parse_condition_list(document, key, pattern_parser)
        getattr(record, attr).extend(entries)
        yield from outcomes
