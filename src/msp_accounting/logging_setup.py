"""Logging configuration for applications embedding the engine."""

import logging
from typing import Optional

from .config.schema import Config, LoggingSettings


def configure_logging(config: Optional[Config] = None) -> None:
    """
    Apply the configured level and format to the root logger.

    Library modules only create their own loggers; nothing is configured
    until an application calls this.

    Args:
        config: Configuration (defaults to built-in logging settings)
    """
    settings = config.logging if config is not None else LoggingSettings()
    logging.basicConfig(level=getattr(logging, settings.level), format=settings.format)
    logging.getLogger("msp_accounting").setLevel(settings.level)
