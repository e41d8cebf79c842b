# relayer_fees/utils/logger.py

import logging
import sys

from relayer_fees import config

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_ROOT_LOGGER_NAME = "relayer_fees"
_configured = False


def _configure_root() -> None:
    global _configured
    if _configured:
        return
    root = logging.getLogger(_ROOT_LOGGER_NAME)
    if not root.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
    level_name = str(config.LOG_LEVEL).upper()
    root.setLevel(getattr(logging, level_name, logging.INFO))
    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Returns a logger under the package root, configuring the root handler once."""
    _configure_root()
    if name != _ROOT_LOGGER_NAME and not name.startswith(_ROOT_LOGGER_NAME + "."):
        name = f"{_ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)
