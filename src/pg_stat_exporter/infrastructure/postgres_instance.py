# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""PostgreSQL Instance - borrowed connection source for collectors.

Wraps an asyncpg pool (or a single externally owned connection) behind the
``acquire_connection`` async context manager that collectors borrow one
connection from per cycle.

Security Policy - DSN Handling:
    The DSN and password are never logged or included in error messages.
    Errors describe what to check ("check host and port") instead.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import asyncpg
from asyncpg import Connection, Pool

from pg_stat_exporter.errors import (
    CollectorError,
    InfraAuthenticationError,
    InfraConnectionError,
    ModelCollectorErrorContext,
    QueryError,
)
from pg_stat_exporter.models import ModelPostgresConnectionConfig

logger = logging.getLogger(__name__)

_TARGET_NAME: str = "postgresql"


class PostgresInstance:
    """Database handle shared by all collectors of one exporter.

    The pool is created lazily on first use. Connections are borrowed per
    cycle and always released, whatever the cycle outcome.

    Example:
        >>> instance = PostgresInstance(ModelPostgresConnectionConfig.from_environment())
        >>> async with instance.acquire_connection() as conn:
        ...     await conn.fetchval("SELECT 1")
        >>> await instance.close()
    """

    def __init__(self, config: ModelPostgresConnectionConfig | None = None) -> None:
        """Initialize the instance without connecting."""
        self.config = config or ModelPostgresConnectionConfig.from_environment()
        self.pool: Pool | None = None
        self._connection: Connection | None = None
        self.is_initialized = False
        self._init_lock = asyncio.Lock()

    @classmethod
    def from_connection(cls, connection: Connection) -> PostgresInstance:
        """Wrap a single connection owned by the caller.

        ``acquire_connection`` yields this connection and ``close`` leaves it
        open.
        """
        instance = cls(ModelPostgresConnectionConfig())
        instance._connection = connection
        instance.is_initialized = True
        return instance

    def _error_context(self, operation: str) -> ModelCollectorErrorContext:
        return ModelCollectorErrorContext(operation=operation, target_name=_TARGET_NAME)

    async def initialize(self) -> None:
        """Create the connection pool.

        Raises:
            InfraAuthenticationError: If the credentials are rejected.
            InfraConnectionError: If the server cannot be reached.
            CollectorError: If the database does not exist or pool creation
                fails for another reason.
        """
        if self.is_initialized:
            return

        # Concurrent first acquisitions must share one pool
        async with self._init_lock:
            if self.is_initialized:
                return
            await self._create_pool()

    async def _create_pool(self) -> None:
        ctx = self._error_context("initialize")
        try:
            self.pool = await asyncpg.create_pool(**self.config.to_pool_kwargs())
        except asyncpg.InvalidPasswordError as e:
            raise InfraAuthenticationError(
                "Database authentication failed - check credentials", context=ctx
            ) from e
        except asyncpg.InvalidCatalogNameError as e:
            raise CollectorError(
                "Database not found - check database name", context=ctx
            ) from e
        except OSError as e:
            raise InfraConnectionError(
                "Failed to connect to database - check host and port", context=ctx
            ) from e
        except Exception as e:
            raise CollectorError(
                f"Failed to initialize database pool: {type(e).__name__}", context=ctx
            ) from e

        self.is_initialized = True
        logger.info(
            "PostgreSQL pool initialized",
            extra={
                "pool_min_size": self.config.min_connections,
                "pool_max_size": self.config.max_connections,
                "command_timeout": self.config.command_timeout,
            },
        )

    async def close(self) -> None:
        """Close the pool. A wrapped external connection is left open."""
        if self.pool is not None:
            await self.pool.close()
            self.pool = None
            logger.info("PostgreSQL pool closed")
        if self._connection is None:
            self.is_initialized = False

    @asynccontextmanager
    async def acquire_connection(self) -> AsyncIterator[Connection]:
        """Borrow a connection for the duration of the context.

        Usage:
            async with instance.acquire_connection() as conn:
                rows = await conn.fetch("SELECT 1")

        Raises:
            QueryError: If no connection can be acquired from the pool.
        """
        if self._connection is not None:
            yield self._connection
            return

        if not self.is_initialized:
            await self.initialize()
        assert self.pool is not None

        try:
            connection = await self.pool.acquire()
        except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError) as e:
            raise QueryError(
                "Failed to acquire a database connection",
                context=self._error_context("acquire"),
                driver_error=type(e).__name__,
            ) from e

        try:
            yield connection
        finally:
            await self.pool.release(connection)


__all__ = ["PostgresInstance"]
