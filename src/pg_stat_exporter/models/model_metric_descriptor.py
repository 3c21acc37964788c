# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Metric Descriptor Model."""

from pydantic import BaseModel, ConfigDict, Field

from pg_stat_exporter.enums import EnumMetricType


def build_fq_name(namespace: str, subsystem: str, name: str) -> str:
    """Join non-empty name parts with underscores.

    Example:
        >>> build_fq_name("pg", "stat_statements", "calls_total")
        'pg_stat_statements_calls_total'
    """
    return "_".join(part for part in (namespace, subsystem, name) if part)


class ModelMetricDescriptor(BaseModel):
    """Immutable metric descriptor: name, help text and label schema.

    Descriptors are built once at startup and shared by reference with the
    collectors that emit against them.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )

    name: str = Field(..., min_length=1, description="Fully-qualified metric name")
    documentation: str = Field(..., description="Metric help text")
    label_names: tuple[str, ...] = Field(
        default=(), description="Ordered label names"
    )
    metric_type: EnumMetricType = Field(
        default=EnumMetricType.COUNTER, description="Prometheus value type"
    )


__all__ = ["ModelMetricDescriptor", "build_fq_name"]
