"""Configuration for the MSP accounting engine."""

from .loader import DEFAULTS_PATH, load_config
from .schema import ActionFee, Config, FeeSettings, LoggingSettings, TimeSettings, ViewSettings

__all__ = [
    "ActionFee",
    "Config",
    "FeeSettings",
    "LoggingSettings",
    "TimeSettings",
    "ViewSettings",
    "DEFAULTS_PATH",
    "load_config",
]
