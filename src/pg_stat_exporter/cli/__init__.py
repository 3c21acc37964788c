# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""pg-stat-exporter command-line interface."""

from pg_stat_exporter.cli.commands import cli

__all__ = ["cli"]
