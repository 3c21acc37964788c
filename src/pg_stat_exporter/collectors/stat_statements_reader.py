# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""pg_stat_statements Snapshot Reader.

Executes the aggregate statistics query on a borrowed asyncpg connection and
yields null-safe ``ModelStatementStatRow`` values.

Cursor Lifetime
===============

asyncpg server-side cursors only live inside a transaction. The reader opens
a read-only transaction, iterates a cursor within it and ends the transaction
when the snapshot context manager exits. Leaving the context manager on any
path (normal exit, scan error, query error, cancellation) therefore releases
the cursor before the caller issues any write on the same connection:

.. code-block:: python

    reader = StatStatementsReader()
    async with reader.open_snapshot(conn, context) as rows:
        async for row in rows:
            ...
    # cursor closed; safe to run pg_stat_statements_reset() on conn

Error Mapping
=============

Driver failures surface as ``QueryError`` (``QueryTimeoutError`` for deadline
and statement-timeout failures). A record that is missing a column or holds a
value of the wrong type surfaces as ``ScanError``. NULL columns are never an
error.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

import asyncpg
from pydantic import ValidationError

from pg_stat_exporter.enums import EnumStatementLabel
from pg_stat_exporter.errors import (
    ModelCollectorErrorContext,
    QueryError,
    QueryTimeoutError,
    ScanError,
)
from pg_stat_exporter.models import ModelCollectionContext, ModelStatementStatRow

if TYPE_CHECKING:
    from collections.abc import Mapping

    from asyncpg import Connection

logger = logging.getLogger(__name__)

STAT_STATEMENTS_TARGET: str = "pg_stat_statements"

_STATEMENT_COLUMNS: dict[EnumStatementLabel, str] = {
    EnumStatementLabel.QUERY: "pg_stat_statements.query",
    EnumStatementLabel.QUERY_ID: "pg_stat_statements.queryid::text",
}

# Result columns, in SELECT order. Names match ModelStatementStatRow fields.
ROW_COLUMNS: tuple[str, ...] = (
    "user",
    "datname",
    "statement",
    "calls_total",
    "mean_seconds_total",
    "max_seconds_total",
    "rows_total",
    "block_read_seconds_total",
    "block_write_seconds_total",
)

# Statistics about the exporter's own settings lookups are excluded
_EXCLUDE_PATTERN: str = "%pg_setting%"

_DRIVER_ERRORS: tuple[type[BaseException], ...] = (
    asyncpg.PostgresError,
    asyncpg.InterfaceError,
    OSError,
)

# Error message prefixes for PostgreSQL errors, used by map_query_error
_POSTGRES_ERROR_PREFIXES: dict[type[asyncpg.PostgresError], str] = {
    asyncpg.UndefinedTableError: (
        "pg_stat_statements relation not found - "
        "run CREATE EXTENSION pg_stat_statements"
    ),
    asyncpg.UndefinedFunctionError: (
        "pg_stat_statements function not found - "
        "run CREATE EXTENSION pg_stat_statements"
    ),
    asyncpg.UndefinedColumnError: (
        "pg_stat_statements column not found - check the extension version"
    ),
    asyncpg.ObjectNotInPrerequisiteStateError: (
        "pg_stat_statements is not loaded - add it to shared_preload_libraries"
    ),
    asyncpg.InsufficientPrivilegeError: "Permission denied reading pg_stat_statements",
}


def build_stat_statements_query(
    statement_label: EnumStatementLabel = EnumStatementLabel.QUERY,
) -> str:
    """Build the aggregate statistics query for a statement label variant.

    Durations are converted from milliseconds to seconds; mean and max
    include planning time.
    """
    statement_column = _STATEMENT_COLUMNS[statement_label]
    # Plan and exec are summed before dividing; both terms end up in seconds
    return f"""SELECT
    pg_get_userbyid(pg_stat_statements.userid) AS "user",
    pg_database.datname AS datname,
    {statement_column} AS statement,
    pg_stat_statements.calls AS calls_total,
    (pg_stat_statements.mean_plan_time + pg_stat_statements.mean_exec_time) / 1000.0
        AS mean_seconds_total,
    (pg_stat_statements.max_plan_time + pg_stat_statements.max_exec_time) / 1000.0
        AS max_seconds_total,
    pg_stat_statements.rows AS rows_total,
    pg_stat_statements.blk_read_time / 1000.0 AS block_read_seconds_total,
    pg_stat_statements.blk_write_time / 1000.0 AS block_write_seconds_total
FROM pg_stat_statements
JOIN pg_database
    ON pg_database.oid = pg_stat_statements.dbid
WHERE pg_stat_statements.query NOT LIKE '{_EXCLUDE_PATTERN}'"""


def map_query_error(
    exc: BaseException,
    error_context: ModelCollectorErrorContext,
    timeout_seconds: float | None = None,
) -> QueryError:
    """Map a driver exception to a QueryError.

    Args:
        exc: The exception raised by asyncpg or the transport.
        error_context: Error context with collector, operation and correlation ID.
        timeout_seconds: Statement timeout in effect, if any.

    Returns:
        QueryTimeoutError for cancellations and timeouts, QueryError otherwise.
    """
    # TimeoutError is an OSError subclass; check it first
    if isinstance(exc, (asyncpg.QueryCanceledError, TimeoutError)):
        return QueryTimeoutError(
            "Statistics query exceeded its deadline",
            context=error_context,
            timeout_seconds=timeout_seconds,
        )

    if isinstance(
        exc, (asyncpg.PostgresConnectionError, asyncpg.InterfaceError, OSError)
    ):
        return QueryError(
            "Database connection lost during statistics query",
            context=error_context,
            driver_error=type(exc).__name__,
        )

    prefix = _POSTGRES_ERROR_PREFIXES.get(type(exc), "Database error")
    message = getattr(exc, "message", None) or type(exc).__name__
    return QueryError(
        f"{prefix}: {message}",
        context=error_context,
        driver_error=type(exc).__name__,
    )


class StatStatementsReader:
    """Read-only snapshot reader for pg_stat_statements.

    The reader holds no per-cycle state; one instance can serve every cycle of
    the collector that owns it.
    """

    def __init__(
        self,
        statement_label: EnumStatementLabel = EnumStatementLabel.QUERY,
        collector_name: str = "stat_statements",
    ) -> None:
        self._statement_label = statement_label
        self._collector_name = collector_name
        self._query = build_stat_statements_query(statement_label)

    @property
    def query(self) -> str:
        return self._query

    @property
    def statement_label(self) -> EnumStatementLabel:
        return self._statement_label

    def _error_context(
        self, context: ModelCollectionContext, operation: str
    ) -> ModelCollectorErrorContext:
        return ModelCollectorErrorContext(
            collector=self._collector_name,
            operation=operation,
            target_name=STAT_STATEMENTS_TARGET,
            correlation_id=context.correlation_id,
        )

    @asynccontextmanager
    async def open_snapshot(
        self, conn: Connection, context: ModelCollectionContext
    ) -> AsyncIterator[AsyncIterator[ModelStatementStatRow]]:
        """Open a snapshot of the statistics relation.

        Yields an async iterator of rows. The cursor behind it is closed when
        the context manager exits.

        Raises:
            QueryTimeoutError: If the context is already expired, or the
                query exceeds the remaining time.
            QueryError: If the query fails.
            ScanError: If a row cannot be decoded (raised during iteration).
        """
        error_context = self._error_context(context, "query")
        timeout = self._statement_timeout(context, error_context)

        rows = self._iterate_rows(conn, timeout, error_context)
        try:
            async with conn.transaction(readonly=True):
                try:
                    yield rows
                finally:
                    await rows.aclose()
        except _DRIVER_ERRORS as e:
            raise map_query_error(e, error_context, timeout) from e

    async def read_batch(
        self, conn: Connection, context: ModelCollectionContext
    ) -> list[ModelStatementStatRow]:
        """Drain a snapshot into a list.

        Returns only after the cursor is closed, so the caller may issue
        writes on ``conn`` immediately.
        """
        async with self.open_snapshot(conn, context) as rows:
            return [row async for row in rows]

    def _statement_timeout(
        self,
        context: ModelCollectionContext,
        error_context: ModelCollectorErrorContext,
    ) -> float | None:
        remaining = context.remaining_seconds()
        if context.is_expired() or remaining == 0.0:
            raise QueryTimeoutError(
                "Collection context expired before the statistics query was issued",
                context=error_context,
                cancelled=context.cancelled,
            )
        return remaining

    async def _iterate_rows(
        self,
        conn: Connection,
        timeout: float | None,
        error_context: ModelCollectorErrorContext,
    ) -> AsyncIterator[ModelStatementStatRow]:
        index = 0
        try:
            async for record in conn.cursor(self._query, timeout=timeout):
                yield self.scan_record(record, index, error_context)
                index += 1
        except _DRIVER_ERRORS as e:
            raise map_query_error(e, error_context, timeout) from e
        except asyncio.CancelledError:
            logger.debug(
                "Statistics query cancelled after %d rows",
                index,
                extra={
                    "collector": self._collector_name,
                    "correlation_id": str(error_context.correlation_id),
                },
            )
            raise

    def scan_record(
        self,
        record: Mapping[str, object],
        index: int,
        error_context: ModelCollectorErrorContext,
    ) -> ModelStatementStatRow:
        """Decode one result record into a row.

        Raises:
            ScanError: If a column is missing or holds a value of the wrong type.
        """
        scan_context = error_context.model_copy(update={"operation": "scan"})
        try:
            values = {column: record[column] for column in ROW_COLUMNS}
        except (KeyError, IndexError) as e:
            raise ScanError(
                f"Row {index} is missing column {e.args[0]!r}",
                context=scan_context,
                row_index=index,
            ) from e

        try:
            return ModelStatementStatRow.model_validate(values)
        except ValidationError as e:
            fields = sorted({str(err["loc"][0]) for err in e.errors() if err["loc"]})
            raise ScanError(
                f"Row {index} has unexpected column types: {', '.join(fields)}",
                context=scan_context,
                row_index=index,
                invalid_columns=fields,
            ) from e


__all__ = [
    "ROW_COLUMNS",
    "STAT_STATEMENTS_TARGET",
    "StatStatementsReader",
    "build_stat_statements_query",
    "map_query_error",
]
