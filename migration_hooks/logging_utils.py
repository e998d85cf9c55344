"""Logging configuration helpers."""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def parse_log_level(value: str) -> str:
    """argparse ``type`` for ``--log-level``; case-insensitive."""
    normalized = value.upper()
    if normalized not in LOG_LEVELS:
        raise ValueError(f"unknown log level {value!r}")
    return normalized


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=getattr(logging, parse_log_level(level)), format=LOG_FORMAT)
