"""Environment configuration for applications using precisemath"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from .logs import DEFAULT_LOG_LEVEL, DEFAULT_LOG_MAXBYTES, setup_logging


@dataclass
class MathEnvironment:
    """Logging settings that can be set either locally in a .env file or passed in from the environment.

    Numeric settings (ONE, PRECISION, iteration caps) are deliberately absent; they are
    fixed so that results are reproducible everywhere.
    """

    log_level: int = DEFAULT_LOG_LEVEL
    log_filename: str | None = None
    # Env passed in is a string "true"
    log_stdout: bool = True
    max_bytes: int = DEFAULT_LOG_MAXBYTES


def get_env_args(dotenv_path: str | Path | None = None) -> MathEnvironment:
    """Load a .env file, if there is one, and parse the PRECISEMATH_* environment variables.

    List of variables:
        PRECISEMATH_LOG_LEVEL : Logging level, should be in ["DEBUG", "INFO", "WARNING"]. Default is "INFO".
        PRECISEMATH_LOG_FILENAME : Optional output filename for logging. Default is no file.
        PRECISEMATH_LOG_STDOUT : Whether to log to stdout, "true" or "false". Default is "true".
        PRECISEMATH_LOG_MAXBYTES : Maximum log file output size, in bytes. Default is 2MB.

    Arguments
    ---------
    dotenv_path : str | Path, optional
        Location of the .env file. Defaults to ".env" in the current working directory.
        Variables already present in the environment take precedence over the file.

    Returns
    -------
    MathEnvironment
        The parsed settings.
    """
    if dotenv_path is None:
        dotenv_path = Path.cwd() / ".env"
    load_dotenv(dotenv_path=dotenv_path)
    # make sure we get a valid log level, default to INFO
    log_level_str = os.environ.get("PRECISEMATH_LOG_LEVEL", "INFO").upper()
    log_level = logging.getLevelName(log_level_str)
    if not isinstance(log_level, int):
        raise ValueError(f"PRECISEMATH_LOG_LEVEL={log_level_str} is not a valid logging level")
    return MathEnvironment(
        log_level=log_level,
        log_filename=os.environ.get("PRECISEMATH_LOG_FILENAME") or None,
        log_stdout=(os.environ.get("PRECISEMATH_LOG_STDOUT", "true").lower() == "true"),
        max_bytes=int(os.environ.get("PRECISEMATH_LOG_MAXBYTES", DEFAULT_LOG_MAXBYTES)),
    )


def setup_logging_from_env(dotenv_path: str | Path | None = None) -> MathEnvironment:
    """Configure logging from the environment and return the settings that were applied."""
    env = get_env_args(dotenv_path)
    setup_logging(
        log_filename=env.log_filename,
        max_bytes=env.max_bytes,
        log_level=env.log_level,
        log_stdout=env.log_stdout,
    )
    return env
