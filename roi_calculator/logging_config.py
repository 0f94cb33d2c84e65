"""
Logging setup shared by the calculator, report and relay modules.

Console output goes through colorlog; the level comes from the
ROI_CALCULATOR_LOG_LEVEL environment variable unless passed explicitly.
"""

import logging
import os
from typing import Optional

import colorlog

from .config import LOG_LEVEL_ENV

ROOT_LOGGER_NAME = 'roi_calculator'

LOG_FORMAT = "%(asctime)s|%(log_color)s%(levelname)-5.5s%(reset)s|%(name)s| %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_COLORS = {
    'DEBUG': 'cyan',
    'INFO': 'green',
    'WARNING': 'yellow',
    'ERROR': 'red',
    'CRITICAL': 'red,bg_white',
}

_configured = False


def configure_logging(level: Optional[str] = None) -> logging.Logger:
    """Attach a colored console handler to the package logger (once)."""
    global _configured

    level_name = (level or os.getenv(LOG_LEVEL_ENV, 'INFO')).upper()
    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(getattr(logging, level_name, logging.INFO))

    if not _configured:
        handler = colorlog.StreamHandler()
        handler.setFormatter(
            colorlog.ColoredFormatter(LOG_FORMAT, datefmt=DATE_FORMAT, log_colors=LOG_COLORS)
        )
        root.addHandler(handler)
        _configured = True

    return root


def get_logger(name: str) -> logging.Logger:
    if not _configured:
        configure_logging()
    return logging.getLogger(name)
