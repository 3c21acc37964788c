# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Exporter Runtime - periodic scrape loop driving the enabled collectors.

Each tick runs every collector concurrently. A collector gets its own
``asyncio.Queue`` sink and its own ``ModelCollectionContext`` with the scrape
timeout, so a slow or failing collector cannot affect the others.

Failure Isolation:
    A collector raising ``CollectorError`` or exceeding the timeout
    contributes no observations for that tick and is reported as
    ``pg_scrape_collector_success{collector="..."} 0``. The previous tick's
    values for it are not carried over.

Thread Safety:
    ``last_observations`` is read from the prometheus_client HTTP thread while
    the scrape loop publishes from the event loop. The published snapshot is
    swapped under a ``threading.Lock``.
"""

from __future__ import annotations

import asyncio
import logging
import threading
import time
from collections.abc import Sequence
from dataclasses import dataclass, field
from uuid import UUID, uuid4

from pg_stat_exporter.errors import (
    CollectorError,
    ModelCollectorErrorContext,
    QueryTimeoutError,
)
from pg_stat_exporter.models import (
    DEFAULT_NAMESPACE,
    ModelCollectionContext,
    ModelMetricObservation,
)
from pg_stat_exporter.observability import build_scrape_descriptors
from pg_stat_exporter.protocols import ProtocolCollector, ProtocolDatabaseInstance

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScrapeResult:
    """Outcome of one collector within one scrape tick."""

    collector: str
    success: bool
    duration_seconds: float
    observations: tuple[ModelMetricObservation, ...] = ()
    error: CollectorError | None = field(default=None, compare=False)


class ExporterRuntime:
    """Scrape loop publishing collector observations for exposition.

    Example:
        >>> runtime = ExporterRuntime(instance, collectors, scrape_timeout=10.0)
        >>> results = await runtime.scrape()
        >>> runtime.last_observations()
    """

    def __init__(
        self,
        instance: ProtocolDatabaseInstance,
        collectors: Sequence[ProtocolCollector],
        scrape_timeout: float = 10.0,
        namespace: str = DEFAULT_NAMESPACE,
    ) -> None:
        self._instance = instance
        self._collectors = tuple(collectors)
        self._scrape_timeout = scrape_timeout
        self._scrape_descriptors = build_scrape_descriptors(namespace)
        self._lock = threading.Lock()
        self._observations: tuple[ModelMetricObservation, ...] = ()

    @property
    def collectors(self) -> tuple[ProtocolCollector, ...]:
        return self._collectors

    def last_observations(self) -> tuple[ModelMetricObservation, ...]:
        """Observations of the last completed scrape, scrape health included."""
        with self._lock:
            return self._observations

    async def scrape(self, correlation_id: UUID | None = None) -> list[ScrapeResult]:
        """Run every collector once and publish the combined observations.

        Returns:
            One ScrapeResult per collector, in collector order.
        """
        correlation_id = correlation_id or uuid4()
        results = list(
            await asyncio.gather(
                *(
                    self._scrape_collector(collector, correlation_id)
                    for collector in self._collectors
                )
            )
        )

        observations: list[ModelMetricObservation] = []
        for result in results:
            observations.extend(result.observations)
        observations.extend(self._health_observations(results))

        with self._lock:
            self._observations = tuple(observations)

        logger.debug(
            "Scrape completed",
            extra={
                "correlation_id": str(correlation_id),
                "collectors": len(results),
                "failed_collectors": [r.collector for r in results if not r.success],
                "observation_count": len(observations),
            },
        )
        return results

    async def _scrape_collector(
        self, collector: ProtocolCollector, correlation_id: UUID
    ) -> ScrapeResult:
        sink: asyncio.Queue[ModelMetricObservation] = asyncio.Queue()
        context = ModelCollectionContext.with_timeout(
            self._scrape_timeout, correlation_id=correlation_id
        )
        started = time.perf_counter()
        error: CollectorError | None = None

        try:
            async with asyncio.timeout(self._scrape_timeout):
                await collector.update(context, self._instance, sink)
        except CollectorError as e:
            error = e
        except TimeoutError:
            error = QueryTimeoutError(
                f"Collector {collector.name!r} exceeded the scrape timeout",
                context=ModelCollectorErrorContext(
                    collector=collector.name,
                    operation="update",
                    correlation_id=correlation_id,
                ),
                timeout_seconds=self._scrape_timeout,
            )

        duration = time.perf_counter() - started
        if error is not None:
            logger.error(
                "Collector %s failed",
                collector.name,
                extra={
                    **error.to_dict(),
                    "collector": collector.name,
                    "duration_seconds": duration,
                },
            )
            return ScrapeResult(
                collector=collector.name,
                success=False,
                duration_seconds=duration,
                error=error,
            )

        observations: list[ModelMetricObservation] = []
        while not sink.empty():
            observations.append(sink.get_nowait())
        return ScrapeResult(
            collector=collector.name,
            success=True,
            duration_seconds=duration,
            observations=tuple(observations),
        )

    def _health_observations(
        self, results: Sequence[ScrapeResult]
    ) -> list[ModelMetricObservation]:
        descriptors = self._scrape_descriptors
        observations: list[ModelMetricObservation] = []
        for result in results:
            observations.append(
                ModelMetricObservation(
                    descriptor=descriptors.success,
                    value=1.0 if result.success else 0.0,
                    label_values=(result.collector,),
                )
            )
        for result in results:
            observations.append(
                ModelMetricObservation(
                    descriptor=descriptors.duration_seconds,
                    value=result.duration_seconds,
                    label_values=(result.collector,),
                )
            )
        return observations

    async def run_forever(self, interval: float) -> None:
        """Scrape every ``interval`` seconds until cancelled.

        An unexpected error in one tick is logged and the loop continues.
        """
        logger.info(
            "Starting scrape loop",
            extra={
                "scrape_interval": interval,
                "scrape_timeout": self._scrape_timeout,
                "collectors": [c.name for c in self._collectors],
            },
        )
        while True:
            started = time.monotonic()
            try:
                await self.scrape()
            except Exception:
                logger.exception("Unexpected error during scrape")
            elapsed = time.monotonic() - started
            await asyncio.sleep(max(0.0, interval - elapsed))


__all__ = ["ExporterRuntime", "ScrapeResult"]
