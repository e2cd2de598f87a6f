import json

import pytest

from compton_config.options import (
    OPAQUE,
    WINTYPES,
    BlurKernel,
    ConfigurationRecord,
    OpacityRule,
    WindowType,
    normalize,
)
from compton_config.patterns import PatternEntry


def test_default_record_has_every_wintype() -> None:
    record = ConfigurationRecord()
    assert set(record.wintype_option) == set(WINTYPES)
    assert len(WINTYPES) == 15
    assert all(override.explicit_fields() == () for override in record.wintype_option.values())


def test_default_records_do_not_share_state() -> None:
    first = ConfigurationRecord()
    second = ConfigurationRecord()
    first.shadow_blacklist.append(PatternEntry("a"))
    first.wintype_option[WindowType.DOCK].shadow = False
    assert second.shadow_blacklist == []
    assert second.wintype_option[WindowType.DOCK].shadow is None


@pytest.mark.parametrize("value,expected", [(-0.1, 0.0), (0.0, 0.0), (0.4, 0.4), (1.0, 1.0), (7, 1.0)])
def test_normalize_clamps(value: float, expected: float) -> None:
    assert normalize(value) == expected


def test_to_dict_is_json_safe() -> None:
    record = ConfigurationRecord()
    record.opacity_rules.append(OpacityRule(80, PatternEntry("focused")))
    record.blur_kerns.append(BlurKernel(1, 1, (0.0,)))
    record.wintype_option[WindowType.POPUP_MENU].opacity = 0.9
    data = json.loads(json.dumps(record.to_dict()))
    assert data["opacity_rules"] == [{"opacity": 80, "pattern": "focused"}]
    assert data["blur_kerns"] == [{"width": 1, "height": 1, "weights": [0.0]}]
    assert data["wintype_option"]["popup_menu"] == {"opacity": 0.9}
    assert data["backend"] == "xrender"
    assert data["inactive_opacity"] == OPAQUE


def test_update_from_copies_fields() -> None:
    target = ConfigurationRecord()
    source = ConfigurationRecord(fade_delta=1, shadow_exclude_reg_str="geom")
    target.update_from(source)
    assert target == source


def test_update_from_keeps_nested_identity() -> None:
    target = ConfigurationRecord()
    rules = target.opacity_rules
    popup = target.wintype_option[WindowType.POPUP_MENU]
    staged = target.staged()
    staged.opacity_rules.append(OpacityRule(50, PatternEntry("focused")))
    staged.wintype_option[WindowType.POPUP_MENU].opacity = 0.5
    assert rules == []
    assert popup.opacity is None

    target.update_from(staged)
    assert target.opacity_rules is rules
    assert rules == [OpacityRule(50, PatternEntry("focused"))]
    assert target.wintype_option[WindowType.POPUP_MENU] is popup
    assert popup.opacity == 0.5
