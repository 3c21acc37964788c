# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Test helpers for pg_stat_exporter unit tests.

Available Utilities:
    FakeConnection: Scripted asyncpg connection recording call order
    FakeTransaction: Transaction context manager used by FakeConnection
    make_stat_record: Statistics query record with overridable columns
    drain: Empty an asyncio.Queue into a list
"""

from tests.helpers.fake_connection import (
    FakeConnection,
    FakeTransaction,
    drain,
    make_stat_record,
)

__all__ = ["FakeConnection", "FakeTransaction", "drain", "make_stat_record"]
