"""Centralized logging setup for the form scraper.

Configures the root logger once and keeps the chattier third-party
libraries (pdfminer, Pillow) at WARNING so per-page debug output from
the scraper stays readable.
"""

import logging
import sys

_NOISY_LOGGERS = ("pdfminer", "PIL", "multipart")


def setup_logging(level: str = "INFO") -> None:
    """Configure the root logger with a standard format.

    Calling this more than once is a no-op after the first handler is
    installed.

    Args:
        level: Logging level string (DEBUG, INFO, WARNING, ERROR, CRITICAL).
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    root = logging.getLogger()

    if root.handlers:
        return

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    root.addHandler(handler)
    root.setLevel(numeric_level)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(numeric_level, logging.WARNING))


def get_logger(name: str) -> logging.Logger:
    """Get a named logger instance.

    Args:
        name: Logger name, typically ``__name__`` of the calling module.

    Returns:
        Configured logger instance.
    """
    return logging.getLogger(name)
