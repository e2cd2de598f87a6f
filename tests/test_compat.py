from compton_config.compat import check_deprecated
from compton_config.document import loads
from compton_config.options import ConfigurationRecord, WindowType


def _doc(text: str):
    return loads(text, "test.conf")


def test_no_dock_shadow_migrates_to_wintype() -> None:
    record = ConfigurationRecord()
    outcomes = check_deprecated(_doc("no-dock-shadow = true;\n"), record)
    dock = record.wintype_option[WindowType.DOCK]
    assert dock.shadow is False
    assert dock.is_set("shadow")
    assert [outcome.key for outcome in outcomes] == ["no-dock-shadow"]
    assert all(outcome.is_warning for outcome in outcomes)


def test_no_dnd_shadow_migrates_even_when_false() -> None:
    record = ConfigurationRecord()
    check_deprecated(_doc("no-dnd-shadow = false;\n"), record)
    assert record.wintype_option[WindowType.DND].shadow is False


def test_menu_opacity_sets_both_menu_types() -> None:
    record = ConfigurationRecord()
    outcomes = check_deprecated(_doc("menu-opacity = 0.8;\n"), record)
    assert record.wintype_option[WindowType.DROPDOWN_MENU].opacity == 0.8
    assert record.wintype_option[WindowType.POPUP_MENU].opacity == 0.8
    assert record.wintype_option[WindowType.MENU].opacity is None
    assert len(outcomes) == 1


def test_detection_without_record() -> None:
    outcomes = check_deprecated(_doc("no-dock-shadow = true;\nmenu-opacity = 1;\n"))
    assert [outcome.key for outcome in outcomes] == ["no-dock-shadow", "menu-opacity"]


def test_removed_options_warn() -> None:
    outcomes = check_deprecated(
        _doc(
            "clear-shadow = false;\n"
            "paint-on-overlay = true;\n"
            "alpha-step = 0.06;\n"
            "glx-use-copysubbuffermesa = true;\n"
            "glx-copy-from-front = true;\n"
        )
    )
    assert [outcome.key for outcome in outcomes] == [
        "clear-shadow",
        "paint-on-overlay",
        "alpha-step",
        "glx-use-copysubbuffermesa",
        "glx-copy-from-front",
    ]
    assert not any(outcome.is_fatal for outcome in outcomes)


def test_removed_glx_options_only_warn_when_enabled() -> None:
    outcomes = check_deprecated(
        _doc("glx-use-copysubbuffermesa = false;\nglx-copy-from-front = false;\n")
    )
    assert outcomes == []


def test_clean_document_has_no_warnings() -> None:
    record = ConfigurationRecord()
    assert check_deprecated(_doc("shadow = true;\n"), record) == []
    assert record == ConfigurationRecord()


def test_wrongly_typed_removed_option_warns() -> None:
    outcomes = check_deprecated(loads('alpha-step = "fast";\n', "test.conf"))
    assert len(outcomes) == 1
    assert outcomes[0].is_warning
    assert outcomes[0].key == "alpha-step"
