"""Option record populated from the configuration file."""

from __future__ import annotations

import copy
import enum
import re
from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Optional, Tuple

from .patterns import PatternEntry

# Fixed-point value of 100% opacity.
OPAQUE = 0xFFFFFFFF

MAX_BLUR_PASS = 5


def normalize(value: float) -> float:
    """Clamp ``value`` into ``[0, 1]``."""

    if value > 1.0:
        return 1.0
    if value < 0.0:
        return 0.0
    return value


class VSync(enum.Enum):
    NONE = "none"
    DRM = "drm"
    OPENGL = "opengl"
    OPENGL_OML = "opengl-oml"
    OPENGL_SWC = "opengl-swc"
    OPENGL_MSWC = "opengl-mswc"


class Backend(enum.Enum):
    XRENDER = "xrender"
    GLX = "glx"
    XR_GLX_HYBRID = "xr_glx_hybrid"


# Spellings accepted for compatibility, each with the warning to emit.
BACKEND_ALIASES: Dict[str, str] = {
    "xr_glx_hybird": (
        "backend xr_glx_hybird should be xr_glx_hybrid, the misspelt version "
        "will be removed soon."
    ),
    "xr-glx-hybrid": (
        "backend xr-glx-hybrid should be xr_glx_hybrid, the alternative "
        "version will be removed soon."
    ),
}

GLX_SWAP_METHODS: Dict[str, int] = {
    "undefined": 0,
    "copy": 1,
    "exchange": 2,
    "buffer-age": -1,
}


class WindowType(enum.Enum):
    UNKNOWN = "unknown"
    DESKTOP = "desktop"
    DOCK = "dock"
    TOOLBAR = "toolbar"
    MENU = "menu"
    UTILITY = "utility"
    SPLASH = "splash"
    DIALOG = "dialog"
    NORMAL = "normal"
    DROPDOWN_MENU = "dropdown_menu"
    POPUP_MENU = "popup_menu"
    TOOLTIP = "tooltip"
    NOTIFY = "notify"
    COMBO = "combo"
    DND = "dnd"


WINTYPES: Tuple[WindowType, ...] = tuple(WindowType)


def parse_vsync(text: str) -> VSync:
    lowered = text.lower()
    for mode in VSync:
        if mode.value == lowered:
            return mode
    raise ValueError(f"Invalid vsync argument: {text}")


def parse_backend(text: str) -> Backend:
    lowered = text.lower()
    for backend in Backend:
        if backend.value == lowered:
            return backend
    if lowered in BACKEND_ALIASES:
        return Backend.XR_GLX_HYBRID
    raise ValueError(f"Invalid backend argument: {text}")


_C_INTEGER = re.compile(r"\s*([+-]?)(?:0[xX]([0-9a-fA-F]+)|0([0-7]*)|([1-9][0-9]*))")


def read_integer(text: str) -> Optional[Tuple[int, int]]:
    """Read a C integer literal (decimal, ``0x`` hex or ``0`` octal) at the start of ``text``.

    Returns the value and the index just past it, or ``None``.
    """

    match = _C_INTEGER.match(text)
    if not match:
        return None
    sign, hex_digits, octal_digits, decimal_digits = match.groups()
    if hex_digits is not None:
        value = int(hex_digits, 16)
    elif decimal_digits is not None:
        value = int(decimal_digits)
    else:
        value = int(octal_digits or "0", 8)
    if sign == "-":
        value = -value
    return value, match.end()


def parse_glx_swap_method(text: str) -> int:
    """Return the buffer age for a swap method name or number.

    ``-1`` means the buffer age is queried at runtime, ``0`` means undefined.
    """

    if text in GLX_SWAP_METHODS:
        return GLX_SWAP_METHODS[text]
    parsed = read_integer(text)
    if parsed is None:
        raise ValueError(f"glx-swap-method is an invalid number: {text}")
    age, end = parsed
    if text[end:].strip():
        raise ValueError(f"Trailing characters in glx-swap-method option: {text}")
    if age > 5 or age < -1:
        raise ValueError(f"Number for glx-swap-method out of range: {age}")
    return age


@dataclass(frozen=True)
class OpacityRule:
    """Opacity (percent) applied to windows matching ``pattern``."""

    opacity: int
    pattern: PatternEntry


@dataclass(frozen=True)
class BlurKernel:
    """Convolution kernel; ``weights`` is row-major with a zero centre."""

    width: int
    height: int
    weights: Tuple[float, ...]

    @property
    def has_negative(self) -> bool:
        return any(weight < 0 for weight in self.weights)


_OVERRIDE_FIELDS = ("shadow", "fade", "focus", "full_shadow", "redir_ignore", "opacity")


@dataclass
class WindowTypeOverride:
    """Per window type options. ``None`` means the option was not set explicitly."""

    shadow: Optional[bool] = None
    fade: Optional[bool] = None
    focus: Optional[bool] = None
    full_shadow: Optional[bool] = None
    redir_ignore: Optional[bool] = None
    opacity: Optional[float] = None

    def is_set(self, name: str) -> bool:
        if name not in _OVERRIDE_FIELDS:
            raise KeyError(name)
        return getattr(self, name) is not None

    def explicit_fields(self) -> Tuple[str, ...]:
        return tuple(name for name in _OVERRIDE_FIELDS if getattr(self, name) is not None)


def _default_wintype_options() -> Dict[WindowType, WindowTypeOverride]:
    return {wintype: WindowTypeOverride() for wintype in WINTYPES}


@dataclass
class ConfigurationRecord:
    """Compositor options.

    Defaults mirror the compositor's built-in values. Loading a file only
    touches the fields the file sets.
    """

    fade_delta: int = 10
    fade_in_step: int = int(0.028 * OPAQUE)
    fade_out_step: int = int(0.03 * OPAQUE)
    shadow_enable: bool = False
    shadow_radius: int = 18
    shadow_opacity: float = 0.75
    shadow_offset_x: int = -15
    shadow_offset_y: int = -15
    shadow_red: float = 0.0
    shadow_green: float = 0.0
    shadow_blue: float = 0.0
    shadow_exclude_reg_str: Optional[str] = None
    shadow_ignore_shaped: bool = False
    xinerama_shadow_crop: bool = False
    fading_enable: bool = False
    no_fading_openclose: bool = False
    no_fading_destroyed_argb: bool = False
    inactive_opacity: int = OPAQUE
    active_opacity: int = OPAQUE
    frame_opacity: float = 1.0
    inactive_opacity_override: bool = False
    inactive_dim: float = 0.0
    inactive_dim_fixed: bool = False
    mark_wmwin_focused: bool = False
    mark_ovredir_focused: bool = False
    detect_rounded_corners: bool = False
    detect_client_opacity: bool = False
    detect_transient: bool = False
    detect_client_leader: bool = False
    refresh_rate: int = 0
    sw_opti: bool = False
    vsync: VSync = VSync.NONE
    backend: Backend = Backend.XRENDER
    use_ewmh_active_win: bool = False
    unredir_if_possible: bool = False
    unredir_if_possible_delay: int = 0
    blur_background: bool = False
    blur_background_frame: bool = False
    blur_background_fixed: bool = False
    blur_kerns: List[BlurKernel] = field(default_factory=list)
    resize_damage: int = 0
    glx_no_stencil: bool = False
    glx_no_rebind_pixmap: bool = False
    glx_swap_method: int = 0
    glx_use_gpushader4: bool = False
    xrender_sync: bool = False
    xrender_sync_fence: bool = False
    shadow_blacklist: List[PatternEntry] = field(default_factory=list)
    fade_blacklist: List[PatternEntry] = field(default_factory=list)
    focus_blacklist: List[PatternEntry] = field(default_factory=list)
    invert_color_list: List[PatternEntry] = field(default_factory=list)
    blur_background_blacklist: List[PatternEntry] = field(default_factory=list)
    unredir_if_possible_blacklist: List[PatternEntry] = field(default_factory=list)
    opacity_rules: List[OpacityRule] = field(default_factory=list)
    wintype_option: Dict[WindowType, WindowTypeOverride] = field(
        default_factory=_default_wintype_options
    )

    def staged(self) -> "ConfigurationRecord":
        """Return a copy whose lists and overrides can change independently.

        Pattern entries and kernels are shared with this record, they are
        immutable.
        """

        copied = copy.copy(self)
        for item in fields(self):
            value = getattr(self, item.name)
            if isinstance(value, list):
                setattr(copied, item.name, list(value))
        copied.wintype_option = {
            wintype: copy.copy(override) for wintype, override in self.wintype_option.items()
        }
        return copied

    def update_from(self, other: "ConfigurationRecord") -> None:
        """Write every field of ``other`` into this record in place.

        Lists and window type overrides keep their identity, so references
        held by callers see the new values.
        """

        for item in fields(self):
            if item.name == "wintype_option":
                continue
            value = getattr(other, item.name)
            current = getattr(self, item.name)
            if isinstance(current, list) and isinstance(value, list):
                current[:] = value
            else:
                setattr(self, item.name, value)
        for wintype, override in other.wintype_option.items():
            target = self.wintype_option.get(wintype)
            if target is None:
                self.wintype_option[wintype] = copy.copy(override)
                continue
            for name in _OVERRIDE_FIELDS:
                setattr(target, name, getattr(override, name))

    def to_dict(self) -> Dict[str, Any]:
        """Return a mapping safe for JSON or YAML output."""

        data: Dict[str, Any] = {}
        for item in fields(self):
            data[item.name] = _plain(getattr(self, item.name))
        return data


def _plain(value: Any) -> Any:
    if isinstance(value, enum.Enum):
        return value.value
    if isinstance(value, PatternEntry):
        return value.text
    if isinstance(value, OpacityRule):
        return {"opacity": value.opacity, "pattern": value.pattern.text}
    if isinstance(value, BlurKernel):
        return {"width": value.width, "height": value.height, "weights": list(value.weights)}
    if isinstance(value, WindowTypeOverride):
        return {name: getattr(value, name) for name in value.explicit_fields()}
    if isinstance(value, dict):
        return {_plain(key): _plain(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_plain(item) for item in value]
    return value
