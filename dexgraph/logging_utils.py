"""Logging setup for dexgraph entry points."""

from __future__ import annotations

import logging
import sys

from . import config

LOGGER_NAME = "dexgraph"


def setup_logging(level: int | str | None = None) -> logging.Logger:
    """Configure the top-level ``dexgraph`` logger.

    Args:
        level: Logging level name or number; defaults to ``DEXGRAPH_LOG_LEVEL``.

    Returns:
        The configured ``dexgraph`` logger.
    """
    logger = logging.getLogger(LOGGER_NAME)
    resolved = level if level is not None else config.LOG_LEVEL
    if isinstance(resolved, str):
        resolved = logging.getLevelName(resolved.upper())
        if not isinstance(resolved, int):
            resolved = logging.INFO
    logger.setLevel(resolved)

    # stdout carries the MCP stdio transport, so logs go to stderr only.
    # Avoid duplicate handlers if called twice.
    if not any(getattr(h, "_dexgraph", False) for h in logger.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s"))
        handler._dexgraph = True  # type: ignore[attr-defined]
        logger.addHandler(handler)

    logger.debug("Logging initialized at level %s", logging.getLevelName(resolved))
    return logger
