import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

import platformdirs
from rich.console import Console
from rich.logging import RichHandler

from relfetch.constants import (
    DEBUG_LOG_FORMAT,
    DEFAULT_LOG_LEVEL,
    INFO_LOG_FORMAT,
    LOG_DATE_FORMAT,
    LOG_FILE_BACKUP_COUNT,
    LOG_FILE_ENV_VAR,
    LOG_FILE_MAX_BYTES,
    LOG_FILE_NAME,
    LOG_LEVEL_ENV_VAR,
    LOGGER_NAME,
    TRUTHY_ENV_VALUES,
)

logger = logging.getLogger(LOGGER_NAME)

# Kept at module level so file logging can be reconfigured
_file_handler: Optional[RotatingFileHandler] = None


def _resolve_level(level_name: str) -> Optional[int]:
    level = getattr(logging, level_name.upper(), None)
    return level if isinstance(level, int) else None


def set_log_level(level_name: str) -> None:
    """
    Set the log level for the relfetch logger and reconfigure all attached handlers.

    If `level_name` is not a valid logging level name (e.g., "DEBUG", "INFO"), a
    warning is logged and the current configuration is left unchanged.

    The console RichHandler always uses a message-only formatter. Other handlers
    (the rotating log file) use INFO_LOG_FORMAT for INFO and above and
    DEBUG_LOG_FORMAT below INFO.

    Parameters:
        level_name (str): Case-insensitive name of the desired logging level.
    """
    level = _resolve_level(level_name)
    if level is None:
        logger.warning(f"Invalid log level name: {level_name}. Using current level.")
        return

    logger.setLevel(level)

    for handler in logger.handlers:
        handler.setLevel(level)
        if isinstance(handler, RichHandler):
            formatter = logging.Formatter("%(message)s")
        elif level >= logging.INFO:
            formatter = logging.Formatter(INFO_LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
        else:
            formatter = logging.Formatter(DEBUG_LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
        handler.setFormatter(formatter)

    logger.debug(f"Log level set to {logging.getLevelName(level)}")


def add_file_logging(log_dir_path: Path, level_name: str = "INFO") -> None:
    """
    Enable rotating file logging for the relfetch logger.

    Creates the directory if necessary and attaches a RotatingFileHandler writing to
    `relfetch.log` inside it. Invalid level names fall back to INFO. Any file
    handler previously attached by this module is removed and closed first.
    """
    global _file_handler
    if _file_handler and _file_handler in logger.handlers:
        logger.removeHandler(_file_handler)
        _file_handler.close()

    log_dir_path.mkdir(parents=True, exist_ok=True)
    log_file = log_dir_path / LOG_FILE_NAME

    resolved = _resolve_level(level_name)
    if resolved is None:
        logger.warning(
            f"Invalid file log level name: {level_name}. Defaulting to INFO."
        )
        resolved = logging.INFO
    if resolved >= logging.INFO:
        file_formatter = logging.Formatter(INFO_LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
    else:
        file_formatter = logging.Formatter(DEBUG_LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    _file_handler = RotatingFileHandler(
        log_file,
        maxBytes=LOG_FILE_MAX_BYTES,
        backupCount=LOG_FILE_BACKUP_COUNT,
        encoding="utf-8",
    )
    _file_handler.setFormatter(file_formatter)
    _file_handler.setLevel(resolved)

    # The logger level gates every handler, so open it up far enough for the file
    if logger.level > resolved:
        logger.setLevel(resolved)

    logger.addHandler(_file_handler)
    logger.debug(
        f"File logging enabled at {log_file} with level {logging.getLevelName(resolved)}"
    )


def file_logging_requested() -> bool:
    """Return True when the RELFETCH_LOG_FILE environment variable enables file logging."""
    return os.environ.get(LOG_FILE_ENV_VAR, "").strip().lower() in TRUTHY_ENV_VALUES


def default_log_dir() -> Path:
    return Path(platformdirs.user_log_dir(LOGGER_NAME))


def _initialize_logger() -> None:
    """
    Initialize the relfetch logger with a stderr RichHandler and an initial log level.

    Existing handlers are removed and propagation to the root logger is disabled.
    The initial level is read from the environment variable named by
    LOG_LEVEL_ENV_VAR, defaulting to DEFAULT_LOG_LEVEL so normal runs keep
    stderr quiet. Standard output stays reserved for listing output.
    """
    logger.propagate = False

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()

    console_handler = RichHandler(
        console=Console(stderr=True),
        rich_tracebacks=True,
        show_time=False,
        show_level=True,
        show_path=False,
        markup=False,
        log_time_format=LOG_DATE_FORMAT,
    )
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(console_handler)

    level_name = os.environ.get(LOG_LEVEL_ENV_VAR, DEFAULT_LOG_LEVEL).upper()
    initial_level = _resolve_level(level_name)
    if initial_level is None:
        initial_level = logging.WARNING
        logger.setLevel(initial_level)
        console_handler.setLevel(initial_level)
        logger.warning(
            f"Invalid {LOG_LEVEL_ENV_VAR}={level_name}; defaulting to {DEFAULT_LOG_LEVEL}."
        )
        return

    logger.setLevel(initial_level)
    console_handler.setLevel(initial_level)


# Initialize the logger when the module is imported
_initialize_logger()
