"""The engine's "Core" and "Sandbox" loggers, written to standard output."""

from __future__ import annotations

import logging
import sys

CORE_LOGGER_NAME = "Core"
SANDBOX_LOGGER_NAME = "Sandbox"

_COLORS = {
    logging.DEBUG: "\033[36m",
    logging.INFO: "\033[32m",
    logging.WARNING: "\033[33m",
    logging.ERROR: "\033[31m",
    logging.CRITICAL: "\033[1;41m",
}
_RESET = "\033[0m"


class _StdoutHandler(logging.StreamHandler):
    """Writes to whatever ``sys.stdout`` is at the time of each record."""

    def __init__(self) -> None:
        super().__init__(sys.stdout)

    def emit(self, record: logging.LogRecord) -> None:
        self.stream = sys.stdout
        super().emit(record)

    def flush(self) -> None:
        self.stream = sys.stdout
        super().flush()


class _ColorFormatter(logging.Formatter):
    def __init__(self) -> None:
        super().__init__("[%(asctime)s] %(name)s: %(message)s", datefmt="%H:%M:%S")

    def format(self, record: logging.LogRecord) -> str:
        text = super().format(record)
        isatty = getattr(sys.stdout, "isatty", None)
        if isatty is not None and isatty():
            color = _COLORS.get(record.levelno, "")
            if color:
                return f"{color}{text}{_RESET}"
        return text


def _configure(name: str) -> logging.Logger:
    logger = logging.getLogger(name)
    for handler in [h for h in logger.handlers if isinstance(h, _StdoutHandler)]:
        logger.removeHandler(handler)
    handler = _StdoutHandler()
    handler.setFormatter(_ColorFormatter())
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    return logger


def init_logging() -> None:
    """Set up both loggers to print every level to standard output."""
    _configure(CORE_LOGGER_NAME)
    _configure(SANDBOX_LOGGER_NAME)


def get_core_logger() -> logging.Logger:
    """Return the engine's own logger."""
    return logging.getLogger(CORE_LOGGER_NAME)


def get_sandbox_logger() -> logging.Logger:
    """Return the logger for application code."""
    return logging.getLogger(SANDBOX_LOGGER_NAME)