"""Logging for read-along, driven by the [logging] config section.

Every module logs through ``logging.getLogger(__name__)``; setup_logging()
attaches one queue handler to the package logger so formatting and file I/O
happen on a listener thread, off the event loop that delivers recognition
events.

    [read_along.logging]
    level = "INFO"
    dir = "~/.read_along/logs"     # READ_ALONG_LOG_DIR
    file = "read-along.log"        # "" disables the file sink
    max_bytes = 5242880
    backup_count = 3
    console = false                # READ_ALONG_CONSOLE_LOGS
"""

import atexit
import logging
import sys
from logging.handlers import QueueHandler, QueueListener, RotatingFileHandler
from queue import SimpleQueue

from .config import ConfigLoader, get_config

PACKAGE_LOGGER = "read_along"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_listener: QueueListener | None = None


def _file_handler(config: ConfigLoader) -> logging.Handler | None:
    log_file = config.log_file
    if log_file is None:
        return None
    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        return RotatingFileHandler(
            log_file,
            maxBytes=int(config.get("logging.max_bytes", 5 * 1024 * 1024)),
            backupCount=int(config.get("logging.backup_count", 3)),
            encoding="utf-8",
        )
    except OSError as e:
        sys.stderr.write(f"read-along: cannot write log file {log_file}: {e}\n")
        return None


def _build_handlers(config: ConfigLoader, console: bool) -> list[logging.Handler]:
    handlers: list[logging.Handler] = []
    file_handler = _file_handler(config)
    if file_handler is not None:
        handlers.append(file_handler)
    # An unwritable log file falls back to stderr
    if console or (file_handler is None and config.log_file is not None):
        handlers.append(logging.StreamHandler(sys.stderr))

    formatter = logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def setup_logging(config: ConfigLoader | None = None, debug: bool = False) -> logging.Logger:
    """Configure the package logger from config.

    Calling it again replaces the previous configuration.

    Args:
        config: Configuration (defaults to the global config)
        debug: Force DEBUG level and the console sink

    Returns:
        The configured package logger

    """
    config = config or get_config()
    level = logging.DEBUG if debug else logging.getLevelName(config.log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    shutdown_logging()
    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(level)
    logger.propagate = False

    handlers = _build_handlers(config, console=debug or config.log_console)
    if not handlers:
        logger.addHandler(logging.NullHandler())
        return logger

    global _listener
    queue: SimpleQueue = SimpleQueue()
    _listener = QueueListener(queue, *handlers)
    _listener.start()
    logger.addHandler(QueueHandler(queue))
    return logger


def shutdown_logging() -> None:
    """Flush pending records and close the sinks."""
    global _listener
    if _listener is None:
        return
    _listener.stop()
    for handler in _listener.handlers:
        handler.close()
    _listener = None


atexit.register(shutdown_logging)

__all__ = ["PACKAGE_LOGGER", "setup_logging", "shutdown_logging"]
