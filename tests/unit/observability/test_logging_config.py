# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Unit tests for configure_logging."""

from __future__ import annotations

import logging
from unittest.mock import patch

import pytest

from pg_stat_exporter.observability import LOG_LEVEL_ENV, configure_logging


class TestConfigureLogging:
    """Tests for log level resolution."""

    def test_defaults_to_info(self) -> None:
        with patch("logging.basicConfig") as mock_basic_config:
            configure_logging()

        assert mock_basic_config.call_args.kwargs["level"] == logging.INFO
        assert mock_basic_config.call_args.kwargs["format"] == (
            "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
        )

    def test_reads_level_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(LOG_LEVEL_ENV, "debug")

        with patch("logging.basicConfig") as mock_basic_config:
            configure_logging()

        assert mock_basic_config.call_args.kwargs["level"] == logging.DEBUG

    def test_explicit_level_wins(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(LOG_LEVEL_ENV, "DEBUG")

        with patch("logging.basicConfig") as mock_basic_config:
            configure_logging("warning")

        assert mock_basic_config.call_args.kwargs["level"] == logging.WARNING

    def test_invalid_level_falls_back_to_info(
        self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        monkeypatch.setenv(LOG_LEVEL_ENV, "VERBOSE")

        with patch("logging.basicConfig") as mock_basic_config:
            configure_logging()

        assert mock_basic_config.call_args.kwargs["level"] == logging.INFO
        assert "Invalid PG_STAT_EXPORTER_LOG_LEVEL 'VERBOSE'" in capsys.readouterr().err
