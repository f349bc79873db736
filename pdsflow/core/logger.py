from __future__ import annotations

import logging
from pathlib import Path

from pds_io.utils.log import build_handlers, log_directory

_LOGGER: logging.Logger | None = None


def get_logger(log_dir: Path | None = None) -> logging.Logger:
    """Return the application logger writing to <log dir>/app.log and stderr.

    Shares the log directory and handler setup of the ``pds_io`` engine logger.
    """
    global _LOGGER
    if _LOGGER is not None:
        return _LOGGER

    logger = logging.getLogger("pdsflow")
    logger.setLevel(logging.INFO)
    logger.propagate = False
    for handler in build_handlers(log_directory(log_dir) / "app.log"):
        logger.addHandler(handler)

    _LOGGER = logger
    return logger
