# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Protocol definition for the database handle borrowed by collectors.

Collectors never own the connection: they borrow one for the duration of a
single cycle and must release every cursor they open before issuing writes
on it.
"""

from __future__ import annotations

from contextlib import AbstractAsyncContextManager
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from asyncpg import Connection

__all__ = [
    "ProtocolDatabaseInstance",
]


@runtime_checkable
class ProtocolDatabaseInstance(Protocol):
    """Source of borrowed asyncpg connections."""

    def acquire_connection(self) -> AbstractAsyncContextManager[Connection]:
        """Borrow a connection; it is released when the context exits."""
        ...
