"""Structured logging configuration with file rotation."""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Callable, Optional

LOG_FORMAT = "%(asctime)s | %(name)s | %(levelname)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(
    level: int = logging.INFO,
    log_dir: Optional[str | Path] = None,
    console_enabled: bool = True,
) -> None:
    """Configure application-wide logging with console and file handlers.

    Args:
        level: Logging level (e.g., logging.DEBUG, logging.INFO).
        log_dir: Directory for log files. Defaults to ./data/logs.
        console_enabled: Whether to output to console.
    """
    log_dir = Path(log_dir or "./data/logs")
    log_dir.mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Remove existing handlers to avoid duplicates on re-init
    root_logger.handlers.clear()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    if console_enabled:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

    # Main file handler (rotating, 10MB, keep 5)
    main_log = log_dir / "docverify.log"
    file_handler = RotatingFileHandler(
        str(main_log),
        maxBytes=10 * 1024 * 1024,
        backupCount=5,
        encoding="utf-8",
    )
    file_handler.setLevel(level)
    file_handler.setFormatter(formatter)
    root_logger.addHandler(file_handler)

    # Separate agent call log
    agent_logger = logging.getLogger("tools.agent_client")
    agent_logger.handlers.clear()
    agent_log = log_dir / "agent_calls.log"
    agent_handler = RotatingFileHandler(
        str(agent_log),
        maxBytes=10 * 1024 * 1024,
        backupCount=5,
        encoding="utf-8",
    )
    agent_handler.setLevel(logging.DEBUG)
    agent_handler.setFormatter(formatter)
    agent_logger.addHandler(agent_handler)

    logging.getLogger(__name__).debug("Logging initialized: level=%s, dir=%s", level, log_dir)


class ForwardingHandler(logging.Handler):
    """Hands every record to a sink as a plain dict.

    Used to mirror logs into a host process or a browser frame. Nothing is
    forwarded unless the handler is installed via install_log_forwarder().
    """

    def __init__(self, sink: Callable[[dict], None], level: int = logging.NOTSET):
        super().__init__(level)
        self.sink = sink

    def emit(self, record: logging.LogRecord) -> None:
        try:
            self.sink({
                "level": record.levelname,
                "logger": record.name,
                "message": record.getMessage(),
                "timestamp": record.created,
            })
        except Exception:
            self.handleError(record)


def install_log_forwarder(
    sink: Callable[[dict], None],
    level: int = logging.INFO,
    logger_name: Optional[str] = None,
) -> ForwardingHandler:
    """Attach a ForwardingHandler to the root (or named) logger and return it."""
    handler = ForwardingHandler(sink, level)
    logging.getLogger(logger_name).addHandler(handler)
    return handler


def remove_log_forwarder(handler: ForwardingHandler, logger_name: Optional[str] = None) -> None:
    """Detach a handler previously returned by install_log_forwarder()."""
    logging.getLogger(logger_name).removeHandler(handler)
