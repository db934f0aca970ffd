import logging
import os
from pathlib import Path

from .const import CONFIG_DIR_NAME, CONFIG_FILE_NAME

LOG_FORMAT = "%(levelname)s %(message)s"

_HANDLER: logging.Handler | None = None


def setup_logging(verbose: bool = False) -> logging.Logger:
    """Attach a stderr handler to the licht logger. Verbose logs each device's
    brightness change at INFO, otherwise only warnings and errors are shown.
    Calling this again only updates the level."""
    global _HANDLER

    logger = logging.getLogger(__package__)
    logger.setLevel(logging.INFO if verbose else logging.WARNING)

    if _HANDLER is None:
        _HANDLER = logging.StreamHandler()
        _HANDLER.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(_HANDLER)

    return logger


def default_config_path() -> Path:
    """$XDG_CONFIG_HOME/licht/config.yaml, falling back to ~/.config"""
    config_home = os.environ.get("XDG_CONFIG_HOME")
    if config_home:
        base = Path(config_home)
    else:
        base = Path.home() / ".config"

    return base / CONFIG_DIR_NAME / CONFIG_FILE_NAME
