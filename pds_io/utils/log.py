"""Logging helpers for the pds_io package."""

# Module responsibilities:
# - Resolve the shared log directory (PDSFLOW_LOG_DIR or ~/PdsFlow/logs) for both packages.
# - Configure the ``pds_io`` logger namespace once with a rotating file and a stderr console.
# - Keep stdout free for command output; every console handler writes to stderr.

from __future__ import annotations

import logging
import logging.handlers
import os
import sys
from pathlib import Path
from typing import Optional

DEFAULT_LOG_BASE = Path.home() / "PdsFlow" / "logs"
LOG_DIR_ENV = "PDSFLOW_LOG_DIR"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
ROOT_LOGGER_NAME = "pds_io"
_LOG_CONFIGURED = False


def log_directory(log_dir: Optional[Path] = None) -> Path:
    """Return the log directory, creating it when missing.

    An explicit ``log_dir`` wins, then ``PDSFLOW_LOG_DIR``, then ``~/PdsFlow/logs``.
    """
    env_dir = os.environ.get(LOG_DIR_ENV)
    target = Path(log_dir) if log_dir is not None else (Path(env_dir) if env_dir else DEFAULT_LOG_BASE)
    target.mkdir(parents=True, exist_ok=True)
    return target


def build_handlers(log_path: Path) -> tuple[logging.Handler, logging.Handler]:
    """Rotating file handler (DEBUG and up) plus a stderr console handler (INFO and up)."""
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    file_handler = logging.handlers.RotatingFileHandler(
        log_path, maxBytes=2_000_000, backupCount=3, encoding="utf-8"
    )
    file_handler.setFormatter(formatter)
    file_handler.setLevel(logging.DEBUG)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    console_handler.setLevel(logging.INFO)
    return file_handler, console_handler


def _configure_logging(log_dir: Optional[Path] = None) -> None:
    global _LOG_CONFIGURED
    if _LOG_CONFIGURED:
        return

    package_logger = logging.getLogger(ROOT_LOGGER_NAME)
    package_logger.setLevel(logging.INFO)
    for handler in build_handlers(log_directory(log_dir) / "pds_io.log"):
        package_logger.addHandler(handler)
    package_logger.propagate = False

    _LOG_CONFIGURED = True


def set_level(level: int) -> None:
    """Adjust the package logger level after configuration."""

    _configure_logging()
    logging.getLogger(ROOT_LOGGER_NAME).setLevel(level)


def get_logger(name: str, log_dir: Optional[Path] = None) -> logging.Logger:
    """Return a package-scoped logger.

    Args:
        name: Logger name suffix appended to the package root logger namespace.
        log_dir: Optional override for the logging directory.

    Returns:
        Configured logger scoped under ``pds_io``.
    """

    _configure_logging(log_dir)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
