"""Logging configuration."""

import logging
import sys
from typing import Literal

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

_configured = False

_FORMATS = {
    "simple": "%(levelname)s | %(name)s | %(message)s",
    "detailed": "%(asctime)s | %(levelname)s | %(name)s | %(funcName)s:%(lineno)d | %(message)s",
}


def setup_logging(level: LogLevel = "INFO", format_style: Literal["simple", "detailed"] = "simple") -> None:
    """Configure root logging once per process.

    Args:
        level: Log level
        format_style: 'simple' for interactive use, 'detailed' for servers
    """
    global _configured

    if _configured:
        return

    logging.basicConfig(
        level=getattr(logging, level),
        format=_FORMATS[format_style],
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    # Model downloads and loading are chatty
    for noisy in ("httpx", "urllib3", "filelock", "huggingface_hub", "faster_whisper", "speechbrain"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance (typically ``get_logger(__name__)``)."""
    return logging.getLogger(name)
