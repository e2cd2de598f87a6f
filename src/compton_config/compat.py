"""Deprecated and removed options."""

from __future__ import annotations

from typing import Any, Callable, List, Optional

from .document import Document
from .errors import Outcome, SettingTypeError
from .options import ConfigurationRecord, WindowType

_REMOVED_FEATURE = (
    "has been removed. If you encounter problems without this feature, "
    "please feel free to open a bug report"
)

# Options that are gone entirely: (key, lookup, warn only when true, message).
REMOVED_OPTIONS = (
    (
        "clear-shadow",
        Document.lookup_bool,
        False,
        '"clear-shadow" is removed as an option, and is always enabled now. '
        "Consider removing it from your config file",
    ),
    (
        "paint-on-overlay",
        Document.lookup_bool,
        False,
        '"paint-on-overlay" has been removed as an option, and is enabled whenever possible',
    ),
    (
        "alpha-step",
        Document.lookup_float,
        False,
        '"alpha-step" has been removed, compton now tries to make use of all alpha values',
    ),
    ("glx-use-copysubbuffermesa", Document.lookup_bool, True, f'"glx-use-copysubbuffermesa" {_REMOVED_FEATURE}'),
    ("glx-copy-from-front", Document.lookup_bool, True, f'"glx-copy-from-front" {_REMOVED_FEATURE}'),
)


def _probe(
    document: Document,
    key: str,
    lookup: Callable[[Document, str], Any],
    outcomes: List[Outcome],
) -> Optional[Any]:
    try:
        return lookup(document, key)
    except SettingTypeError as exc:
        outcomes.append(Outcome.warn(key, str(exc)))
        return None


def check_deprecated(
    document: Document, record: Optional[ConfigurationRecord] = None
) -> List[Outcome]:
    """Warn about deprecated options and migrate renamed ones.

    With a ``record``, renamed options are translated into explicit window
    type overrides so old configuration files keep their behaviour. The
    migration happens whenever the old key is present, whatever its value.
    """

    outcomes: List[Outcome] = []

    if _probe(document, "no-dock-shadow", Document.lookup_bool, outcomes) is not None:
        outcomes.append(
            Outcome.warn(
                "no-dock-shadow",
                "Option `no-dock-shadow` is deprecated, and will be removed. "
                "Please use the wintype option `shadow` of `dock` instead.",
            )
        )
        if record is not None:
            record.wintype_option[WindowType.DOCK].shadow = False

    if _probe(document, "no-dnd-shadow", Document.lookup_bool, outcomes) is not None:
        outcomes.append(
            Outcome.warn(
                "no-dnd-shadow",
                "Option `no-dnd-shadow` is deprecated, and will be removed. "
                "Please use the wintype option `shadow` of `dnd` instead.",
            )
        )
        if record is not None:
            record.wintype_option[WindowType.DND].shadow = False

    menu_opacity = _probe(document, "menu-opacity", Document.lookup_float, outcomes)
    if menu_opacity is not None:
        outcomes.append(
            Outcome.warn(
                "menu-opacity",
                "Option `menu-opacity` is deprecated, and will be removed. Please use "
                "the wintype option `opacity` of `popup_menu` and `dropdown_menu` instead.",
            )
        )
        if record is not None:
            record.wintype_option[WindowType.DROPDOWN_MENU].opacity = menu_opacity
            record.wintype_option[WindowType.POPUP_MENU].opacity = menu_opacity

    for key, lookup, only_when_true, message in REMOVED_OPTIONS:
        value = _probe(document, key, lookup, outcomes)
        if value is None or (only_when_true and not value):
            continue
        outcomes.append(Outcome.warn(key, message))

    return outcomes
