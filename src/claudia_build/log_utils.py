"""Logging setup for claudia-build.

Console output uses leveled prefixes ([INFO], [SUCCESS], [WARNING], [ERROR])
so every pipeline stage reports in the same shape. A rotating log file can be
attached for CI runs.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, TextIO

SUCCESS = 25
logging.addLevelName(SUCCESS, "SUCCESS")

# Marks handlers installed by setup_logging so repeated calls replace only them
_HANDLER_TAG = "_claudia_build_handler"


class LevelPrefixFormatter(logging.Formatter):
    """Renders records as ``[LEVEL] message`` with optional ANSI colors."""

    COLORS = {
        logging.DEBUG: "\033[0;37m",
        logging.INFO: "\033[0;34m",
        SUCCESS: "\033[0;32m",
        logging.WARNING: "\033[1;33m",
        logging.ERROR: "\033[0;31m",
        logging.CRITICAL: "\033[0;31m",
    }
    RESET = "\033[0m"

    def __init__(self, use_color: bool = False):
        super().__init__("%(message)s")
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        prefix = f"[{record.levelname}]"
        if self.use_color:
            color = self.COLORS.get(record.levelno, "")
            prefix = f"{color}{prefix}{self.RESET}"
        return f"{prefix} {message}"


def setup_logging(
    verbose: bool = False,
    log_file: Optional[Path] = None,
    stream: Optional[TextIO] = None,
) -> None:
    """Setup logging for a pipeline run.

    Args:
        verbose: Log at DEBUG level (includes external command lines)
        log_file: Optional path for a rotating log file
        stream: Console stream (default: sys.stdout)
    """
    logger = logging.getLogger()
    level = logging.DEBUG if verbose else logging.INFO
    logger.setLevel(level)

    for handler in list(logger.handlers):
        if getattr(handler, _HANDLER_TAG, False):
            logger.removeHandler(handler)
            handler.close()

    console = stream if stream is not None else sys.stdout
    console_handler = logging.StreamHandler(console)
    console_handler.setLevel(level)
    use_color = hasattr(console, "isatty") and console.isatty()
    console_handler.setFormatter(LevelPrefixFormatter(use_color=use_color))
    setattr(console_handler, _HANDLER_TAG, True)
    logger.addHandler(console_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            str(log_file),
            maxBytes=10 * 1024 * 1024,  # 10MB
            backupCount=3,
        )
        file_handler.setLevel(logging.DEBUG)
        file_formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        file_handler.setFormatter(file_formatter)
        setattr(file_handler, _HANDLER_TAG, True)
        logger.addHandler(file_handler)


def log_success(message: str, *args: object) -> None:
    """Log a message at the SUCCESS level."""
    logging.log(SUCCESS, message, *args)
