"""Per window type overrides from the ``wintypes`` group."""

from __future__ import annotations

from typing import Iterable, List

from .document import Document
from .errors import Outcome, SettingTypeError
from .options import WINTYPES, ConfigurationRecord, WindowType, normalize

# Boolean settings inside ``wintypes.<name>`` and the override attribute each sets.
BOOL_FIELDS = (
    ("shadow", "shadow"),
    ("fade", "fade"),
    ("focus", "focus"),
    ("full-shadow", "full_shadow"),
    ("redir-ignore", "redir_ignore"),
)


def build_overrides(
    document: Document,
    record: ConfigurationRecord,
    categories: Iterable[WindowType] = WINTYPES,
) -> List[Outcome]:
    """Fill ``record.wintype_option`` from ``wintypes.<category>`` groups.

    Settings missing from a group leave the override unset. Opacity is
    clamped into ``[0, 1]`` but not scaled.
    """

    outcomes: List[Outcome] = []
    for category in categories:
        key = f"wintypes.{category.value}"
        try:
            section = document.section(key)
        except SettingTypeError as exc:
            outcomes.append(Outcome.warn(key, str(exc)))
            continue
        if section is None:
            continue

        override = record.wintype_option[category]
        for name, attr in BOOL_FIELDS:
            try:
                value = section.lookup_bool(name)
            except SettingTypeError as exc:
                outcomes.append(Outcome.warn(f"{key}.{name}", str(exc)))
                continue
            if value is not None:
                setattr(override, attr, value)

        try:
            opacity = section.lookup_float("opacity")
        except SettingTypeError as exc:
            outcomes.append(Outcome.warn(f"{key}.opacity", str(exc)))
        else:
            if opacity is not None:
                override.opacity = normalize(opacity)
    return outcomes
