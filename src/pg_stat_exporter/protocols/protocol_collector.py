# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Protocol definition for collectors driven by the scrape runtime.

Concurrency Safety:
    The runtime runs at most one cycle per collector instance at a time.
    Collectors do not guard against overlapping ``update`` calls on the same
    instance.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from pg_stat_exporter.models import ModelCollectionContext, ModelMetricDescriptor
    from pg_stat_exporter.protocols.protocol_database_instance import (
        ProtocolDatabaseInstance,
    )
    from pg_stat_exporter.protocols.protocol_metric_sink import ProtocolMetricSink

__all__ = [
    "ProtocolCollector",
]


@runtime_checkable
class ProtocolCollector(Protocol):
    """A leaf collector invoked once per scrape tick."""

    @property
    def name(self) -> str:
        """Collector name used for registration and scrape metrics."""
        ...

    def describe(self) -> tuple[ModelMetricDescriptor, ...]:
        """Return the descriptors this collector emits against."""
        ...

    async def update(
        self,
        context: ModelCollectionContext,
        instance: ProtocolDatabaseInstance,
        sink: ProtocolMetricSink,
    ) -> None:
        """Collect one snapshot into ``sink``.

        Raises:
            QueryError: If the statistics query fails.
            ScanError: If a row cannot be decoded.
        """
        ...
