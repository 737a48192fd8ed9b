"""Logging configuration for the hygro application."""

import logging
import sys

_configured = False

LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s - %(message)s"


def configure(level: int | str = logging.INFO, log_file: str = "") -> None:
    """Configure logging for the application.

    Console output goes to stderr at the given level. When a log file is
    set, records at INFO and above are also appended to it.

    Safe to call multiple times - only configures once.
    """
    global _configured
    if _configured:
        return

    formatter = logging.Formatter(LOG_FORMAT)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root = logging.getLogger("hygro")
    root.setLevel(level)
    root.addHandler(handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(formatter)
        file_handler.setLevel(max(logging.INFO, root.level))
        root.addHandler(file_handler)

    # Configure uvicorn root logger to use the same format
    # (child loggers like uvicorn.error propagate to this)
    uv_log = logging.getLogger("uvicorn")
    uv_log.handlers.clear()
    uv_log.addHandler(handler)
    uv_log.setLevel(level)

    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the 'hygro' namespace.

    Args:
        name: Logger name (will be prefixed with 'hygro.')

    Returns:
        Configured logger instance.
    """
    return logging.getLogger(f"hygro.{name}")
