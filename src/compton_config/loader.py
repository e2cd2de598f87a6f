"""Load a configuration file into a :class:`ConfigurationRecord`."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterator, List, Mapping, Optional

from .compat import check_deprecated
from .document import Document, parse
from .errors import DocumentSyntaxError, Outcome
from .extract import BACKEND_OPTIONS, BLUR_OPTIONS, CORE_OPTIONS, LoadState, extract_scalars
from .locator import locate
from .logging import get_logger
from .options import ConfigurationRecord
from .patterns import PatternParser, parse_pattern
from .rules import (
    CONDITION_LISTS,
    UNREDIR_CONDITION_LIST,
    blur_kern_outcomes,
    iter_condition_lists,
    parse_opacity_rules,
)
from .wintypes import build_overrides

logger = get_logger("compton.config")


@dataclass
class LoadResult:
    """What a successful load reports besides the updated record."""

    path: Optional[str] = None
    blur_kern_has_negative: bool = False
    log_level: Optional[int] = None
    warnings: List[str] = field(default_factory=list)


def _opacity_rule_step(
    document: Document, state: LoadState, pattern_parser: PatternParser
) -> Iterator[Outcome]:
    rules, outcomes = parse_opacity_rules(document, "opacity-rule", pattern_parser)
    for outcome in outcomes:
        if outcome.is_fatal:
            yield outcome
            return
    state.record.opacity_rules.extend(rules)
    yield from outcomes


def _blur_kern_step(document: Document, state: LoadState) -> Iterator[Outcome]:
    parsed, outcomes = blur_kern_outcomes(document, "blur-kern")
    if parsed is not None:
        state.record.blur_kerns = parsed[0]
        state.blur_kern_has_negative = parsed[1]
    yield from outcomes


def run_steps(
    document: Document, state: LoadState, pattern_parser: PatternParser = parse_pattern
) -> Iterator[Outcome]:
    """Yield the outcome of every extraction step, in option order."""

    record = state.record
    yield from extract_scalars(document, state, CORE_OPTIONS)
    yield from iter_condition_lists(document, record, CONDITION_LISTS, pattern_parser)
    yield from _opacity_rule_step(document, state, pattern_parser)
    yield from iter_condition_lists(document, record, (UNREDIR_CONDITION_LIST,), pattern_parser)
    yield from extract_scalars(document, state, BLUR_OPTIONS)
    yield from _blur_kern_step(document, state)
    yield from extract_scalars(document, state, BACKEND_OPTIONS)
    yield from check_deprecated(document, record)
    yield from build_overrides(document, record)


def apply_document(
    document: Document,
    record: ConfigurationRecord,
    pattern_parser: PatternParser = parse_pattern,
) -> LoadResult:
    """Apply ``document`` to ``record``.

    Changes are staged on a copy and only committed once every step has
    run, so a fatal error raises :class:`FatalConfigError` and leaves
    ``record`` as it was.
    """

    state = LoadState(record.staged())
    result = LoadResult(path=document.path)
    for outcome in run_steps(document, state, pattern_parser):
        if outcome.is_fatal:
            logger.critical(outcome.message, extra={"key": outcome.key})
            raise outcome.to_exception()
        if outcome.is_warning:
            logger.warning(outcome.message, extra={"key": outcome.key})
            result.warnings.append(outcome.message)

    record.update_from(state.record)
    result.blur_kern_has_negative = state.blur_kern_has_negative
    result.log_level = state.log_level
    return result


def load_config(
    record: ConfigurationRecord,
    config_file: Optional[str] = None,
    *,
    pattern_parser: PatternParser = parse_pattern,
    log_handle: Optional[logging.Logger] = None,
    env: Optional[Mapping[str, str]] = None,
) -> Optional[LoadResult]:
    """Locate, parse and apply the configuration file.

    Returns a result with ``path=None`` when no file exists, and ``None``
    when the file has a syntax error. Fatal problems raise
    :class:`FatalConfigError`; ``record`` is only modified on success. A
    ``log-level`` option is applied to ``log_handle``.
    """

    located = locate(config_file, env=env)
    if located is None:
        logger.debug("No configuration file found, using defaults")
        return LoadResult()

    with located:
        try:
            document = parse(located.stream, located.path)
        except DocumentSyntaxError as exc:
            logger.error(
                'Error when reading configuration file "%s", line %s: %s',
                exc.path,
                exc.line if exc.line is not None else "?",
                exc.message,
            )
            return None

    logger.info("Loading configuration", extra={"path": located.path})
    result = apply_document(document, record, pattern_parser)
    if result.log_level is not None:
        handle = log_handle if log_handle is not None else get_logger("compton")
        handle.setLevel(result.log_level)
    return result
