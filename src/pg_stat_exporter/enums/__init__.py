# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Exporter Enumerations Module.

Exports:
    EnumCollectionPhase: Phases of a single collection cycle
    EnumCollectorErrorCode: Error classification for CollectorError
    EnumMetricType: Prometheus value type (COUNTER, GAUGE)
    EnumStatementLabel: Statement identifier variant (QUERY, QUERY_ID)
"""

from pg_stat_exporter.enums.enum_collection_phase import EnumCollectionPhase
from pg_stat_exporter.enums.enum_collector_error_code import EnumCollectorErrorCode
from pg_stat_exporter.enums.enum_metric_type import EnumMetricType
from pg_stat_exporter.enums.enum_statement_label import EnumStatementLabel

__all__ = [
    "EnumCollectionPhase",
    "EnumCollectorErrorCode",
    "EnumMetricType",
    "EnumStatementLabel",
]
