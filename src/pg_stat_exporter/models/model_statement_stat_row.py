# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Statement Statistics Row Model.

One aggregate observation for a (user, database, statement) triple at the
moment of read. Every field is independently nullable: a NULL column
degrades to "unknown" for labels and 0 for counters and never rejects the
row. Present values are kept as read, sign included. A value of the wrong
type fails validation and is reported by the reader as a ScanError.
"""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

UNKNOWN_LABEL: str = "unknown"
"""Placeholder label value for unresolved user, database or statement."""


class ModelStatementStatRow(BaseModel):
    """Null-safe pg_stat_statements aggregate row.

    Attributes:
        user: Owning role name, None when it could not be resolved
        datname: Database name, None when it could not be resolved
        statement: Statement text or queryid, depending on label variant
        calls_total: Cumulative invocation count
        mean_seconds_total: Mean planning plus execution time, seconds
        max_seconds_total: Max planning plus execution time, seconds
        rows_total: Cumulative rows retrieved or affected
        block_read_seconds_total: Cumulative block read time, seconds
        block_write_seconds_total: Cumulative block write time, seconds
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )

    user: Optional[str] = Field(default=None)
    datname: Optional[str] = Field(default=None)
    statement: Optional[str] = Field(default=None)
    calls_total: Optional[int] = Field(default=None)
    mean_seconds_total: Optional[float] = Field(default=None)
    max_seconds_total: Optional[float] = Field(default=None)
    rows_total: Optional[int] = Field(default=None)
    block_read_seconds_total: Optional[float] = Field(default=None)
    block_write_seconds_total: Optional[float] = Field(default=None)

    @field_validator("user", "datname", "statement", mode="before")
    @classmethod
    def _validate_label(cls, value: object) -> object:
        if value is None or isinstance(value, str):
            return value
        raise ValueError(f"expected text, got {type(value).__name__}")

    @field_validator("calls_total", "rows_total", mode="before")
    @classmethod
    def _validate_count(cls, value: object) -> object:
        if value is None:
            return None
        # bool is an int subclass; a boolean column here is a shape mismatch
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(f"expected integer, got {type(value).__name__}")
        return value

    @field_validator(
        "mean_seconds_total",
        "max_seconds_total",
        "block_read_seconds_total",
        "block_write_seconds_total",
        mode="before",
    )
    @classmethod
    def _validate_seconds(cls, value: object) -> object:
        if value is None:
            return None
        if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
            raise ValueError(f"expected number, got {type(value).__name__}")
        return float(value)

    def user_label(self) -> str:
        return self.user if self.user is not None else UNKNOWN_LABEL

    def datname_label(self) -> str:
        return self.datname if self.datname is not None else UNKNOWN_LABEL

    def statement_label(self) -> str:
        return self.statement if self.statement is not None else UNKNOWN_LABEL

    def label_values(self) -> tuple[str, str, str]:
        """Return the resolved (user, datname, statement) label triple."""
        return (self.user_label(), self.datname_label(), self.statement_label())

    def counter_values(self) -> tuple[float, float, float, float, float, float]:
        """Return the six resolved counter values in emission order.

        Order: calls, mean seconds, max seconds, rows, block read seconds,
        block write seconds. NULL fields resolve to 0.0.
        """
        return (
            _or_zero(self.calls_total),
            _or_zero(self.mean_seconds_total),
            _or_zero(self.max_seconds_total),
            _or_zero(self.rows_total),
            _or_zero(self.block_read_seconds_total),
            _or_zero(self.block_write_seconds_total),
        )


def _or_zero(value: int | float | None) -> float:
    return float(value) if value is not None else 0.0


__all__ = ["UNKNOWN_LABEL", "ModelStatementStatRow"]
