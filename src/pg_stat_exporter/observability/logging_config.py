# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Logging setup for the exporter process."""

from __future__ import annotations

import logging
import os
import sys

LOG_LEVEL_ENV: str = "PG_STAT_EXPORTER_LOG_LEVEL"

_VALID_LEVELS: frozenset[str] = frozenset(
    {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
)


def configure_logging(level: str | None = None) -> None:
    """Configure root logging with the exporter's line format.

    Must be called before configuration is loaded so that configuration
    errors are logged too. The level comes from ``level`` when given, else
    from the PG_STAT_EXPORTER_LOG_LEVEL environment variable (default: INFO).
    An unknown level falls back to INFO with a warning on stderr.

    Example:
        >>> configure_logging()
        >>> logger.info("Scrape completed", extra={"duration_seconds": 0.12})
    """
    log_level = (level or os.getenv(LOG_LEVEL_ENV, "INFO")).upper()

    if log_level not in _VALID_LEVELS:
        print(
            f"Warning: Invalid {LOG_LEVEL_ENV} '{log_level}', using INFO. "
            f"Valid levels: {', '.join(sorted(_VALID_LEVELS))}",
            file=sys.stderr,
        )
        log_level = "INFO"

    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


__all__ = ["LOG_LEVEL_ENV", "configure_logging"]
