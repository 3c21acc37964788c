# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""pg_stat_statements Collector - snapshot emission with optional reset-after-read.

Every row read from pg_stat_statements becomes six counter observations
labelled by (user, datname, statement):

    calls_total, mean_seconds_total, max_seconds_total, rows_total,
    block_read_seconds_total, block_write_seconds_total

NULL labels resolve to "unknown" and NULL counters to 0.

Read-Only vs Reset-After-Read
============================

The policy is fixed at construction by ``ModelCollectorSettings.reset_after_read``.

- Read-only: each row is emitted while the cursor is still open. A scan error
  part-way through leaves the rows already emitted in the sink.
- Reset-after-read: the whole snapshot is buffered, the cursor is closed,
  ``pg_stat_statements_reset()`` is executed on the same connection and only
  then is the buffer emitted. A failed reset is logged and does not fail the
  cycle, so values already read are always reported. The next cycle then
  reports aggregates accumulated since the last successful reset.

Cardinality is one series per distinct statement, so the collector is
registered disabled by default.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterator
from dataclasses import dataclass
from typing import TYPE_CHECKING

from pg_stat_exporter.collectors.stat_statements_reader import (
    STAT_STATEMENTS_TARGET,
    StatStatementsReader,
)
from pg_stat_exporter.enums import (
    EnumCollectionPhase,
    EnumMetricType,
    EnumStatementLabel,
)
from pg_stat_exporter.errors import ModelCollectorErrorContext, ResetError
from pg_stat_exporter.models import (
    DEFAULT_NAMESPACE,
    ModelCollectionContext,
    ModelCollectorSettings,
    ModelMetricDescriptor,
    ModelMetricObservation,
    ModelStatementStatRow,
    build_fq_name,
)

if TYPE_CHECKING:
    from asyncpg import Connection

    from pg_stat_exporter.collectors.registry import CollectorRegistry
    from pg_stat_exporter.protocols import ProtocolDatabaseInstance, ProtocolMetricSink

logger = logging.getLogger(__name__)

STAT_STATEMENTS_SUBSYSTEM: str = "stat_statements"

STAT_STATEMENTS_RESET_SQL: str = "SELECT pg_stat_statements_reset()"


@dataclass(frozen=True)
class StatStatementsDescriptors:
    """The six pg_stat_statements descriptors, iterable in emission order."""

    calls_total: ModelMetricDescriptor
    mean_seconds_total: ModelMetricDescriptor
    max_seconds_total: ModelMetricDescriptor
    rows_total: ModelMetricDescriptor
    block_read_seconds_total: ModelMetricDescriptor
    block_write_seconds_total: ModelMetricDescriptor

    def __iter__(self) -> Iterator[ModelMetricDescriptor]:
        return iter(
            (
                self.calls_total,
                self.mean_seconds_total,
                self.max_seconds_total,
                self.rows_total,
                self.block_read_seconds_total,
                self.block_write_seconds_total,
            )
        )

    def __len__(self) -> int:
        return 6


def build_stat_statements_descriptors(
    namespace: str = DEFAULT_NAMESPACE,
    statement_label: EnumStatementLabel = EnumStatementLabel.QUERY,
) -> StatStatementsDescriptors:
    """Build the pg_stat_statements descriptor bundle.

    Called once per collector at construction; the bundle is shared by
    reference with every cycle.

    Example:
        >>> descriptors = build_stat_statements_descriptors()
        >>> descriptors.calls_total.name
        'pg_stat_statements_calls_total'
        >>> descriptors.calls_total.label_names
        ('user', 'datname', 'query')
    """
    label_names = ("user", "datname", statement_label.value)

    def counter(name: str, documentation: str) -> ModelMetricDescriptor:
        return ModelMetricDescriptor(
            name=build_fq_name(namespace, STAT_STATEMENTS_SUBSYSTEM, name),
            documentation=documentation,
            label_names=label_names,
            metric_type=EnumMetricType.COUNTER,
        )

    return StatStatementsDescriptors(
        calls_total=counter("calls_total", "Number of times executed"),
        mean_seconds_total=counter(
            "mean_seconds_total",
            "Mean total time spent in the statement, in seconds",
        ),
        max_seconds_total=counter(
            "max_seconds_total",
            "Max total time spent in the statement, in seconds",
        ),
        rows_total=counter(
            "rows_total",
            "Total number of rows retrieved or affected by the statement",
        ),
        block_read_seconds_total=counter(
            "block_read_seconds_total",
            "Total time the statement spent reading blocks, in seconds",
        ),
        block_write_seconds_total=counter(
            "block_write_seconds_total",
            "Total time the statement spent writing blocks, in seconds",
        ),
    )


class StatStatementsCollector:
    """Collector turning pg_stat_statements snapshots into counter observations.

    Thread Safety:
        One cycle at a time per instance. ``phase`` is informational and is
        not a lock.

    Example:
        >>> collector = StatStatementsCollector(
        ...     ModelCollectorSettings(reset_after_read=True)
        ... )
        >>> queue: asyncio.Queue[ModelMetricObservation] = asyncio.Queue()
        >>> await collector.update(
        ...     ModelCollectionContext.with_timeout(10.0), instance, queue
        ... )
    """

    def __init__(
        self,
        settings: ModelCollectorSettings | None = None,
        descriptors: StatStatementsDescriptors | None = None,
        reader: StatStatementsReader | None = None,
    ) -> None:
        self._settings = settings or ModelCollectorSettings()
        self._descriptors = descriptors or build_stat_statements_descriptors(
            self._settings.namespace, self._settings.statement_label
        )
        self._reader = reader or StatStatementsReader(
            self._settings.statement_label, collector_name=STAT_STATEMENTS_SUBSYSTEM
        )
        self._phase = EnumCollectionPhase.IDLE

    @property
    def name(self) -> str:
        return STAT_STATEMENTS_SUBSYSTEM

    @property
    def reset_after_read(self) -> bool:
        return self._settings.reset_after_read

    @property
    def phase(self) -> EnumCollectionPhase:
        """Current cycle phase; IDLE between cycles."""
        return self._phase

    @property
    def descriptors(self) -> StatStatementsDescriptors:
        return self._descriptors

    def describe(self) -> tuple[ModelMetricDescriptor, ...]:
        return tuple(self._descriptors)

    async def update(
        self,
        context: ModelCollectionContext,
        instance: ProtocolDatabaseInstance,
        sink: ProtocolMetricSink,
    ) -> None:
        """Run one collection cycle into ``sink``.

        Args:
            context: Deadline and cancellation for this cycle.
            instance: Database handle; one connection is borrowed for the cycle.
            sink: Output channel receiving six observations per row.

        Raises:
            QueryError: If the statistics query fails; nothing is emitted in
                reset-after-read mode.
            ScanError: If a row cannot be decoded; nothing is emitted in
                reset-after-read mode.
        """
        started = time.perf_counter()
        try:
            async with instance.acquire_connection() as conn:
                if self._settings.reset_after_read:
                    row_count = await self._collect_and_reset(conn, context, sink)
                else:
                    row_count = await self._collect_streaming(conn, context, sink)
        finally:
            self._phase = EnumCollectionPhase.IDLE

        logger.debug(
            "Collected %d pg_stat_statements rows",
            row_count,
            extra={
                "collector": self.name,
                "correlation_id": str(context.correlation_id),
                "row_count": row_count,
                "reset_after_read": self._settings.reset_after_read,
                "duration_seconds": time.perf_counter() - started,
            },
        )

    async def _collect_streaming(
        self,
        conn: Connection,
        context: ModelCollectionContext,
        sink: ProtocolMetricSink,
    ) -> int:
        row_count = 0
        self._phase = EnumCollectionPhase.QUERYING
        async with self._reader.open_snapshot(conn, context) as rows:
            async for row in rows:
                self._phase = EnumCollectionPhase.EMITTING
                await self._emit_row(row, sink)
                row_count += 1
        return row_count

    async def _collect_and_reset(
        self,
        conn: Connection,
        context: ModelCollectionContext,
        sink: ProtocolMetricSink,
    ) -> int:
        batch: list[ModelStatementStatRow] = []
        self._phase = EnumCollectionPhase.QUERYING
        async with self._reader.open_snapshot(conn, context) as rows:
            async for row in rows:
                self._phase = EnumCollectionPhase.BUFFERING
                batch.append(row)

        # Cursor is closed; the reset may now run on the same connection
        self._phase = EnumCollectionPhase.RESETTING
        try:
            await self._reset(conn, context)
        except ResetError as e:
            logger.warning(
                "pg_stat_statements reset failed, emitting the snapshot read before it",
                extra={**e.to_dict(), "row_count": len(batch)},
            )

        self._phase = EnumCollectionPhase.EMITTING
        for row in batch:
            await self._emit_row(row, sink)
        return len(batch)

    async def _reset(self, conn: Connection, context: ModelCollectionContext) -> None:
        """Clear server-side aggregates.

        Raises:
            ResetError: If the context has expired or the reset command fails.
        """
        error_context = ModelCollectorErrorContext(
            collector=self.name,
            operation="reset",
            target_name=STAT_STATEMENTS_TARGET,
            correlation_id=context.correlation_id,
        )
        if context.is_expired():
            raise ResetError(
                "Collection context expired before the statistics reset",
                context=error_context,
            )
        try:
            await conn.execute(
                STAT_STATEMENTS_RESET_SQL, timeout=context.remaining_seconds()
            )
        except Exception as e:
            raise ResetError(
                f"Statistics reset failed: {type(e).__name__}",
                context=error_context,
                driver_error=type(e).__name__,
            ) from e

    async def _emit_row(
        self, row: ModelStatementStatRow, sink: ProtocolMetricSink
    ) -> None:
        label_values = row.label_values()
        for descriptor, value in zip(self._descriptors, row.counter_values()):
            await sink.put(
                ModelMetricObservation(
                    descriptor=descriptor,
                    value=value,
                    label_values=label_values,
                )
            )


def create_stat_statements_collector(
    settings: ModelCollectorSettings,
) -> StatStatementsCollector:
    """Collector factory used by the registry."""
    return StatStatementsCollector(settings)


def register_stat_statements_collector(registry: CollectorRegistry) -> None:
    """Register the pg_stat_statements collector, disabled by default.

    Every unique statement creates a new time series, which can be expensive
    on a busy server.
    """
    registry.register(
        STAT_STATEMENTS_SUBSYSTEM,
        default_enabled=False,
        factory=create_stat_statements_collector,
    )


__all__ = [
    "STAT_STATEMENTS_RESET_SQL",
    "STAT_STATEMENTS_SUBSYSTEM",
    "StatStatementsCollector",
    "StatStatementsDescriptors",
    "build_stat_statements_descriptors",
    "create_stat_statements_collector",
    "register_stat_statements_collector",
]
