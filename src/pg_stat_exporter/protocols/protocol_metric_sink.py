# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Protocol definition for metric observation sinks.

A sink is the output channel a collector pushes observations onto. The
collector never reads the sink back and never retries a push; ``put`` may
block while the consumer applies backpressure, and cancelling a blocked
push is the caller's responsibility.

``asyncio.Queue`` satisfies this protocol as-is.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from pg_stat_exporter.models import ModelMetricObservation

__all__ = [
    "ProtocolMetricSink",
]


@runtime_checkable
class ProtocolMetricSink(Protocol):
    """Awaitable output channel for metric observations."""

    async def put(self, item: ModelMetricObservation) -> None:
        """Push one observation, waiting if the sink is full."""
        ...
