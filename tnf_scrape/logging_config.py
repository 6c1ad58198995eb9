"""Logging configuration for the product scraper.

Console output is human readable and colored on a terminal; the file output
is one JSON object per line so fetch runs can be grepped and replayed later.
"""

import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

__all__ = [
    "setup_logging",
    "get_logger",
    "log_scrape_event",
    "LOG_DIR",
    "ROOT_LOGGER_NAME",
]

ROOT_LOGGER_NAME = "tnf_scrape"

LOG_DIR = Path(__file__).parent.parent / "logs"


class JSONLFileHandler(logging.Handler):
    """Writes structured JSONL logs, one file per day."""

    def __init__(self, log_dir: Path, prefix: str = "tnf_scrape"):
        super().__init__()
        self.log_dir = log_dir
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.prefix = prefix

    def _get_log_file(self) -> Path:
        today = datetime.now().strftime("%Y%m%d")
        return self.log_dir / f"{self.prefix}_{today}.jsonl"

    def emit(self, record: logging.LogRecord) -> None:
        try:
            entry: Dict[str, Any] = {
                "timestamp": datetime.now().isoformat(),
                "level": record.levelname,
                "logger": record.name,
                "message": record.getMessage(),
            }
            if hasattr(record, "event_type"):
                entry["event_type"] = record.event_type
            if hasattr(record, "extra_data"):
                entry.update(record.extra_data)

            with open(self._get_log_file(), "a", encoding="utf-8") as f:
                f.write(json.dumps(entry, ensure_ascii=False) + "\n")
        except Exception:
            self.handleError(record)


class ColoredConsoleHandler(logging.StreamHandler):
    """Console handler that colors the level name on a TTY."""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        if hasattr(self.stream, "isatty") and self.stream.isatty():
            color = self.COLORS.get(record.levelname, "")
            if color:
                message = message.replace(
                    record.levelname, f"{color}{record.levelname}{self.RESET}", 1
                )
        return message


def setup_logging(
    level: int = logging.INFO,
    log_to_file: bool = True,
    log_to_console: bool = True,
    log_dir: Optional[Path] = None,
) -> logging.Logger:
    """Set up logging for the scraper.

    Args:
        level: Console logging level (default: INFO)
        log_to_file: Whether to log to a JSONL file
        log_to_console: Whether to log to the console
        log_dir: Custom log directory (default: project logs/)

    Returns:
        The configured package logger
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(logging.DEBUG if log_to_file else level)
    logger.handlers.clear()

    if log_to_console:
        console_handler = ColoredConsoleHandler(sys.stdout)
        console_handler.setLevel(level)
        console_handler.setFormatter(
            logging.Formatter("%(asctime)s [%(levelname)s] %(message)s", datefmt="%H:%M:%S")
        )
        logger.addHandler(console_handler)

    if log_to_file:
        file_handler = JSONLFileHandler(log_dir or LOG_DIR)
        file_handler.setLevel(logging.DEBUG)
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str = ROOT_LOGGER_NAME) -> logging.Logger:
    """Get a logger under the package hierarchy.

    Args:
        name: Short module name, e.g. 'scraper' -> 'tnf_scrape.scraper'
    """
    if name == ROOT_LOGGER_NAME:
        return logging.getLogger(ROOT_LOGGER_NAME)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def log_scrape_event(
    event_type: str,
    data: Dict[str, Any],
    level: int = logging.INFO,
    logger_name: str = ROOT_LOGGER_NAME,
) -> None:
    """Log a structured scrape event.

    Args:
        event_type: Type of event (e.g. 'product_fetch', 'fetch_error', 'output_saved')
        data: Event-specific data; an optional 'message' key becomes the log message
        level: Log level
        logger_name: Logger to use
    """
    logger = get_logger(logger_name)
    if not logger.isEnabledFor(level):
        return

    record = logger.makeRecord(
        logger.name,
        level,
        "(tnf_scrape)",
        0,
        data.get("message", event_type),
        (),
        None,
    )
    record.event_type = event_type
    record.extra_data = {k: v for k, v in data.items() if k != "message"}

    logger.handle(record)
