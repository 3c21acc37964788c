# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Collector Error Context Model.

Bundles the structured fields shared by every collector error so that
error constructors stay short while keeping strong typing.
"""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class ModelCollectorErrorContext(BaseModel):
    """Structured context attached to collector errors.

    Attributes:
        collector: Collector name (e.g. "stat_statements")
        operation: Operation being performed (query, scan, reset, initialize)
        target_name: Target resource name (e.g. "pg_stat_statements")
        correlation_id: Collection cycle correlation ID

    Example:
        >>> context = ModelCollectorErrorContext(
        ...     collector="stat_statements",
        ...     operation="query",
        ...     target_name="pg_stat_statements",
        ...     correlation_id=uuid4(),
        ... )
        >>> raise QueryError("pg_stat_statements is not installed", context=context)
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )

    collector: Optional[str] = Field(
        default=None,
        description="Collector name",
    )
    operation: Optional[str] = Field(
        default=None,
        description="Operation being performed (query, scan, reset, initialize)",
    )
    target_name: Optional[str] = Field(
        default=None,
        description="Target resource name",
    )
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="Collection cycle correlation ID",
    )


__all__ = ["ModelCollectorErrorContext"]
