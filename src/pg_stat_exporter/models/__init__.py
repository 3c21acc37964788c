# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Exporter Models Module.

Exports:
    ModelStatementStatRow: Null-safe pg_stat_statements aggregate row
    ModelMetricDescriptor: Metric name, help text and label schema
    ModelMetricObservation: One labelled value of a descriptor
    ModelCollectionContext: Deadline and cancellation for one cycle
    ModelCollectorSettings: Collector construction-time policy
    ModelPostgresConnectionConfig: Database connection and pool settings
    ModelExporterConfig: Top-level exporter configuration
"""

from pg_stat_exporter.models.model_collection_context import ModelCollectionContext
from pg_stat_exporter.models.model_collector_settings import (
    DEFAULT_NAMESPACE,
    ModelCollectorSettings,
)
from pg_stat_exporter.models.model_exporter_config import ModelExporterConfig
from pg_stat_exporter.models.model_metric_descriptor import (
    ModelMetricDescriptor,
    build_fq_name,
)
from pg_stat_exporter.models.model_metric_observation import ModelMetricObservation
from pg_stat_exporter.models.model_postgres_connection_config import (
    ModelPostgresConnectionConfig,
)
from pg_stat_exporter.models.model_statement_stat_row import (
    UNKNOWN_LABEL,
    ModelStatementStatRow,
)

__all__ = [
    "DEFAULT_NAMESPACE",
    "UNKNOWN_LABEL",
    "ModelCollectionContext",
    "ModelCollectorSettings",
    "ModelExporterConfig",
    "ModelMetricDescriptor",
    "ModelMetricObservation",
    "ModelPostgresConnectionConfig",
    "ModelStatementStatRow",
    "build_fq_name",
]
