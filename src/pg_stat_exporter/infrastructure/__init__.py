# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Exporter Infrastructure Module.

Exports:
    PostgresInstance: asyncpg pool wrapper lending connections to collectors
"""

from pg_stat_exporter.infrastructure.postgres_instance import PostgresInstance

__all__ = ["PostgresInstance"]
