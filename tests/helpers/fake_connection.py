# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Scripted asyncpg connection double for collector tests.

``FakeConnection`` implements the slice of ``asyncpg.Connection`` the
collectors use (``transaction``, ``cursor``, ``execute``) and records every
call in ``events`` so tests can assert ordering, for example that the
snapshot transaction ends before the reset command runs.

Usage Example:
    >>> conn = FakeConnection([make_stat_record(calls_total=42)])
    >>> instance = PostgresInstance.from_connection(conn)
    >>> await collector.update(context, instance, queue)
    >>> conn.events
    ['transaction_enter:readonly', 'cursor_open', 'cursor_exhausted',
     'transaction_exit', 'execute:SELECT pg_stat_statements_reset()']
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Mapping, Sequence
from types import TracebackType

_DEFAULT_RECORD: dict[str, object] = {
    "user": "app",
    "datname": "prod",
    "statement": "SELECT 1",
    "calls_total": 42,
    "mean_seconds_total": 0.01,
    "max_seconds_total": 0.02,
    "rows_total": 1,
    "block_read_seconds_total": 0.001,
    "block_write_seconds_total": 0.0,
}


def make_stat_record(**overrides: object) -> dict[str, object]:
    """Build a result record shaped like the statistics query output."""
    record = dict(_DEFAULT_RECORD)
    record.update(overrides)
    return record


class FakeTransaction:
    """Async context manager recording transaction boundaries."""

    def __init__(self, conn: FakeConnection, readonly: bool) -> None:
        self._conn = conn
        self._readonly = readonly

    async def __aenter__(self) -> FakeTransaction:
        mode = "readonly" if self._readonly else "readwrite"
        self._conn.events.append(f"transaction_enter:{mode}")
        self._conn.in_transaction = True
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self._conn.in_transaction = False
        self._conn.events.append(
            "transaction_exit" if exc_type is None else "transaction_rollback"
        )


class FakeConnection:
    """Scripted connection returning ``records`` from its cursor.

    Args:
        records: Records yielded by the cursor, in order.
        cursor_error: Raised when the cursor is opened.
        fail_after: Raise ``iteration_error`` after this many records.
        iteration_error: Error raised mid-iteration.
        execute_error: Raised by ``execute``.
        row_delay: Seconds to sleep before yielding each record.
    """

    def __init__(
        self,
        records: Sequence[Mapping[str, object]] = (),
        *,
        cursor_error: BaseException | None = None,
        fail_after: int | None = None,
        iteration_error: BaseException | None = None,
        execute_error: BaseException | None = None,
        row_delay: float = 0.0,
    ) -> None:
        self.records = list(records)
        self.cursor_error = cursor_error
        self.fail_after = fail_after
        self.iteration_error = iteration_error
        self.execute_error = execute_error
        self.row_delay = row_delay
        self.events: list[str] = []
        self.cursor_calls: list[tuple[str, float | None]] = []
        self.execute_calls: list[tuple[str, float | None]] = []
        self.in_transaction = False

    def transaction(self, *, readonly: bool = False) -> FakeTransaction:
        return FakeTransaction(self, readonly)

    def cursor(self, query: str, *, timeout: float | None = None) -> AsyncIterator[Mapping[str, object]]:
        self.cursor_calls.append((query, timeout))
        return self._iterate()

    async def _iterate(self) -> AsyncIterator[Mapping[str, object]]:
        if not self.in_transaction:
            raise AssertionError("cursor used outside a transaction")
        self.events.append("cursor_open")
        if self.cursor_error is not None:
            raise self.cursor_error
        for index, record in enumerate(self.records):
            if self.fail_after is not None and index == self.fail_after:
                assert self.iteration_error is not None
                raise self.iteration_error
            if self.row_delay:
                await asyncio.sleep(self.row_delay)
            yield record
        self.events.append("cursor_exhausted")

    async def execute(self, query: str, *, timeout: float | None = None) -> str:
        if self.in_transaction:
            raise AssertionError("execute issued while the snapshot transaction is open")
        self.execute_calls.append((query, timeout))
        self.events.append(f"execute:{query}")
        if self.execute_error is not None:
            raise self.execute_error
        return "SELECT 1"


def drain(queue: asyncio.Queue[object]) -> list[object]:
    """Remove and return everything currently in ``queue``."""
    items: list[object] = []
    while not queue.empty():
        items.append(queue.get_nowait())
    return items


__all__ = ["FakeConnection", "FakeTransaction", "drain", "make_stat_record"]
