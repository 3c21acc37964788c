# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Pytest configuration and shared fixtures for pg_stat_exporter tests."""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from pg_stat_exporter.collectors import get_collector_registry

_EXPORTER_ENV_VARS = (
    "POSTGRES_DSN",
    "POSTGRES_HOST",
    "POSTGRES_PORT",
    "POSTGRES_DATABASE",
    "POSTGRES_USER",
    "POSTGRES_PASSWORD",
    "POSTGRES_MIN_CONNECTIONS",
    "POSTGRES_MAX_CONNECTIONS",
    "POSTGRES_COMMAND_TIMEOUT",
    "POSTGRES_SSL_MODE",
    "PG_STAT_EXPORTER_LISTEN_PORT",
    "PG_STAT_EXPORTER_SCRAPE_INTERVAL",
    "PG_STAT_EXPORTER_SCRAPE_TIMEOUT",
    "PG_STAT_EXPORTER_COLLECTORS",
    "PG_STAT_EXPORTER_RESET_AFTER_READ",
    "PG_STAT_EXPORTER_STATEMENT_LABEL",
    "PG_STAT_EXPORTER_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_exporter_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove exporter variables inherited from the developer's shell."""
    for name in _EXPORTER_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def reset_collector_registry() -> Iterator[None]:
    """Leave the process-wide collector registry empty after each test."""
    yield
    get_collector_registry().clear()
