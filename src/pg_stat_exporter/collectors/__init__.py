# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Exporter Collectors Module.

Exports:
    StatStatementsReader: Read-only snapshot of pg_stat_statements
    StatStatementsCollector: Emission pipeline with optional reset-after-read
    build_stat_statements_descriptors: Descriptor bundle factory
    CollectorRegistry: Thread-safe collector registration
    register_builtin_collectors: Registration hook for shipped collectors
    get_collector_registry: Process-wide registry singleton
"""

from pg_stat_exporter.collectors.registry import (
    CollectorRegistry,
    ModelCollectorRegistration,
    get_collector_registry,
    register_builtin_collectors,
)
from pg_stat_exporter.collectors.stat_statements import (
    STAT_STATEMENTS_RESET_SQL,
    STAT_STATEMENTS_SUBSYSTEM,
    StatStatementsCollector,
    StatStatementsDescriptors,
    build_stat_statements_descriptors,
)
from pg_stat_exporter.collectors.stat_statements_reader import (
    StatStatementsReader,
    build_stat_statements_query,
)

__all__ = [
    "STAT_STATEMENTS_RESET_SQL",
    "STAT_STATEMENTS_SUBSYSTEM",
    "CollectorRegistry",
    "ModelCollectorRegistration",
    "StatStatementsCollector",
    "StatStatementsDescriptors",
    "StatStatementsReader",
    "build_stat_statements_descriptors",
    "build_stat_statements_query",
    "get_collector_registry",
    "register_builtin_collectors",
]
