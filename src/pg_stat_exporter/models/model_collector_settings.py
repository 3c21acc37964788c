# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Collector Settings Model."""

from pydantic import BaseModel, ConfigDict, Field

from pg_stat_exporter.enums import EnumStatementLabel

DEFAULT_NAMESPACE: str = "pg"


class ModelCollectorSettings(BaseModel):
    """Construction-time policy handed to every collector factory.

    Attributes:
        reset_after_read: Buffer each snapshot and reset server-side
            aggregates before emitting it
        statement_label: Which column identifies a statement
        namespace: Metric name prefix
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )

    reset_after_read: bool = Field(default=False)
    statement_label: EnumStatementLabel = Field(default=EnumStatementLabel.QUERY)
    namespace: str = Field(default=DEFAULT_NAMESPACE, pattern=r"^[a-zA-Z_][a-zA-Z0-9_]*$")


__all__ = ["DEFAULT_NAMESPACE", "ModelCollectorSettings"]
