"""Attach handlers to the precisemath package logger."""
from __future__ import annotations

import logging
import os
import sys
from logging.handlers import RotatingFileHandler

# Logging defaults
DEFAULT_LOG_LEVEL = logging.INFO
DEFAULT_LOG_FORMATTER = "\n%(asctime)s: %(levelname)s: %(module)s.%(funcName)s:\n%(message)s"
DEFAULT_LOG_DATETIME = "%y-%m-%d %H:%M:%S"
DEFAULT_LOG_MAXBYTES = int(2e6)  # 2MB

PACKAGE_LOGGER_NAME = "precisemath"


def get_logger() -> logging.Logger:
    """The logger every precisemath module logs through."""
    return logging.getLogger(PACKAGE_LOGGER_NAME)


def setup_logging(
    log_level: int | None = None,
    log_filename: str | None = None,
    max_bytes: int | None = None,
    log_stdout: bool = True,
    log_format_string: str | None = None,
) -> logging.Logger:
    r"""Send precisemath records to stdout, a rotating log file, or both.

    Only the package logger is touched; the root logger and other libraries are left alone.
    Handlers from a previous call are replaced. The approximations log at DEBUG, so pass
    `log_level=logging.DEBUG` to trace convergence.

    Arguments
    ---------
    log_level : int, optional
        Level for the package logger and its handlers. Defaults to DEFAULT_LOG_LEVEL.
    log_filename : str, optional
        Path of a log file; ".log" is appended if missing. No file is written if None.
    max_bytes : int, optional
        Size at which the log file rolls over. Defaults to DEFAULT_LOG_MAXBYTES.
    log_stdout : bool, optional
        Whether to log to standard output. Defaults to True.
    log_format_string : str, optional
        Format for every handler. Defaults to DEFAULT_LOG_FORMATTER.

    Returns
    -------
    logging.Logger
        The configured package logger.
    """
    logger = get_logger()
    close_logging(delete_logs=False)
    level = DEFAULT_LOG_LEVEL if log_level is None else log_level
    formatter = logging.Formatter(log_format_string or DEFAULT_LOG_FORMATTER, DEFAULT_LOG_DATETIME)
    handlers: list[logging.Handler] = []
    if log_stdout:
        handlers.append(logging.StreamHandler(sys.stdout))
    if log_filename is not None:
        if not log_filename.endswith(".log"):
            log_filename += ".log"
        log_dir = os.path.dirname(log_filename)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        handlers.append(
            RotatingFileHandler(log_filename, mode="w", maxBytes=max_bytes or DEFAULT_LOG_MAXBYTES, encoding="UTF-8")
        )
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    logger.setLevel(level)
    return logger


def close_logging(delete_logs: bool = False) -> None:
    """Close and detach the handlers added by setup_logging.

    The package's NullHandler stays, so an application that never configures
    logging still sees nothing from precisemath.

    Arguments
    ---------
    delete_logs : bool
        Whether to delete the files written by file handlers.
    """
    logger = get_logger()
    for handler in list(logger.handlers):
        if isinstance(handler, logging.NullHandler):
            continue
        handler.close()
        logger.removeHandler(handler)
        # only file handlers have a baseFilename
        log_path = getattr(handler, "baseFilename", None)
        if delete_logs and log_path is not None and os.path.exists(log_path):
            os.remove(log_path)
    logger.setLevel(logging.NOTSET)
