# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Exporter Runtime Module.

Exports:
    ExporterRuntime: Periodic scrape loop over the enabled collectors
    ScrapeResult: Per-collector outcome of one scrape tick
"""

from pg_stat_exporter.runtime.exporter_runtime import ExporterRuntime, ScrapeResult

__all__ = ["ExporterRuntime", "ScrapeResult"]
