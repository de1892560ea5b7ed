"""
Logging Setup

One line per event:

    [2026-10-19T08:15:02.114+00:00] INFO     [medora.main] GET /api/records method=GET status=200 duration_ms=3.1

Anything passed through ``extra=`` is appended as key=value pairs, so call
sites keep the message short and put identifiers in context:

    logger.info("Prediction saved", extra={"record_id": record.id})
"""
import logging
import sys
from datetime import datetime, timezone
from typing import Iterable, Optional

# Attributes every LogRecord has; anything else came in through ``extra``.
_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}

# Libraries that log every request at INFO.
NOISY_LOGGERS = ("httpx", "httpcore", "uvicorn.access")

_LEVEL_COLORS = {
    logging.DEBUG: "\033[36m",
    logging.INFO: "\033[32m",
    logging.WARNING: "\033[33m",
    logging.ERROR: "\033[31m",
    logging.CRITICAL: "\033[35m",
}
_RESET = "\033[0m"


class StructuredFormatter(logging.Formatter):
    """Timestamp, level, logger, message, then extra context as key=value."""

    def __init__(self, use_color: bool = False):
        super().__init__()
        self.use_color = use_color

    @staticmethod
    def context(record: logging.LogRecord) -> str:
        pairs = [
            f"{key}={value}"
            for key, value in vars(record).items()
            if key not in _RECORD_ATTRS and not key.startswith("_")
        ]
        return " ".join(pairs)

    def format(self, record: logging.LogRecord) -> str:
        stamp = datetime.fromtimestamp(record.created, timezone.utc).isoformat(timespec="milliseconds")
        line = f"[{stamp}] {record.levelname:8} [{record.name}] {record.getMessage()}"

        context = self.context(record)
        if context:
            line = f"{line} {context}"
        if self.use_color:
            line = f"{_LEVEL_COLORS.get(record.levelno, '')}{line}{_RESET}"
        if record.exc_info:
            line += f"\n{self.formatException(record.exc_info)}"
        return line


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    quiet: Iterable[str] = NOISY_LOGGERS,
) -> None:
    """
    Configure the root logger.

    Args:
        level: Level name; unknown names fall back to INFO.
        log_file: Also write (uncoloured) lines to this file.
        quiet: Loggers raised to WARNING so they do not drown request logs.
    """
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    root.handlers.clear()

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(StructuredFormatter(use_color=sys.stdout.isatty()))
    root.addHandler(console)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(StructuredFormatter())
        root.addHandler(file_handler)

    for name in quiet:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
