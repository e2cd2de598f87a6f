"""Configuration file loader for the compton compositor."""

from .errors import (
    ConfigError,
    DocumentSyntaxError,
    FatalConfigError,
    InvalidEnumError,
    InvalidRuleError,
    UnreadableConfigError,
)
from .loader import LoadResult, apply_document, load_config
from .options import ConfigurationRecord, WindowType, WindowTypeOverride

__all__ = [
    "ConfigError",
    "ConfigurationRecord",
    "DocumentSyntaxError",
    "FatalConfigError",
    "InvalidEnumError",
    "InvalidRuleError",
    "LoadResult",
    "UnreadableConfigError",
    "WindowType",
    "WindowTypeOverride",
    "apply_document",
    "load_config",
]

__version__ = "0.1.0"
