"""
Logging utilities for the FastAPI application and CLI scripts.

Provides a consistent logging format and configuration.
"""

import logging
import sys

_NOISY_LOGGERS: tuple[str, ...] = (
    "httpx",
    "httpcore",
    "google.auth",
    "google.api_core",
    "grpc",
    "PIL",
)


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging with a sensible default format."""
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        stream=sys.stdout,
    )
    # Client libraries log every request at INFO/DEBUG.
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


__all__ = ["configure_logging"]
