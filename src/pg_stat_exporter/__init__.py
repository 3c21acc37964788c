# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""pg_stat_exporter - snapshot-to-timeseries collector for pg_stat_statements.

This package reads the aggregated statement statistics maintained by the
``pg_stat_statements`` extension, converts each aggregate row into named
Prometheus counter observations and, when configured, resets the server-side
aggregates after every read.

Key Components:
    - StatStatementsReader: read-only snapshot of the statistics relation
    - StatStatementsCollector: emission pipeline with optional reset-after-read
    - CollectorRegistry: explicit collector registration and enablement
    - ExporterRuntime / PrometheusBridge: scrape scheduling and exposition
"""

__version__ = "0.1.0"

__all__: list[str] = ["__version__"]
