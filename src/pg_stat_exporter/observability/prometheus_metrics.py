# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Prometheus Integration for the Exporter.

Bridges the collector observations of the last completed scrape into a
``prometheus_client`` registry and serves them over HTTP.

The bridge is a custom collector: it owns no ``Counter``/``Gauge`` objects.
Every ``collect()`` call rebuilds metric families from the observations
snapshot, so series that disappear from pg_stat_statements (for example after
a reset) disappear from the exposition as well.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from prometheus_client import CollectorRegistry as PrometheusRegistry
from prometheus_client import generate_latest, start_http_server
from prometheus_client.core import (
    CounterMetricFamily,
    GaugeMetricFamily,
    Metric,
)

from pg_stat_exporter.enums import EnumMetricType
from pg_stat_exporter.models import (
    DEFAULT_NAMESPACE,
    ModelMetricDescriptor,
    ModelMetricObservation,
    build_fq_name,
)

if TYPE_CHECKING:
    from prometheus_client.registry import Collector

logger = logging.getLogger(__name__)

SCRAPE_SUBSYSTEM: str = "scrape"


@dataclass(frozen=True)
class ScrapeDescriptors:
    """Per-collector scrape health descriptors."""

    success: ModelMetricDescriptor
    duration_seconds: ModelMetricDescriptor


class ProtocolObservationSource(Protocol):
    """Anything holding the observations of the last completed scrape."""

    def last_observations(self) -> Sequence[ModelMetricObservation]: ...


def build_scrape_descriptors(namespace: str = DEFAULT_NAMESPACE) -> ScrapeDescriptors:
    """Build the per-collector scrape health descriptors.

    Example:
        >>> build_scrape_descriptors().success.name
        'pg_scrape_collector_success'
    """

    def gauge(name: str, documentation: str) -> ModelMetricDescriptor:
        return ModelMetricDescriptor(
            name=build_fq_name(namespace, SCRAPE_SUBSYSTEM, name),
            documentation=documentation,
            label_names=("collector",),
            metric_type=EnumMetricType.GAUGE,
        )

    return ScrapeDescriptors(
        success=gauge(
            "collector_success", "Whether a collector succeeded (1) or failed (0)"
        ),
        duration_seconds=gauge(
            "collector_duration_seconds", "Duration of a collector scrape, in seconds"
        ),
    )


def observations_to_families(
    observations: Iterable[ModelMetricObservation],
) -> list[Metric]:
    """Group observations by descriptor into Prometheus metric families.

    Families keep the order in which their descriptor first appears, and
    series keep the order in which their label values first appear.
    Observations sharing a descriptor and label values are summed into one
    series. pg_stat_statements can report the same (user, datname, query)
    more than once, for example as top-level and nested entries, and the
    exposition must not repeat a series.
    """
    descriptors: dict[str, ModelMetricDescriptor] = {}
    series: dict[str, dict[tuple[str, ...], float]] = {}
    merged = 0
    for observation in observations:
        descriptor = observation.descriptor
        if descriptor.name not in descriptors:
            descriptors[descriptor.name] = descriptor
            series[descriptor.name] = {}
        values = series[descriptor.name]
        key = observation.label_values
        if key in values:
            merged += 1
            values[key] += observation.value
        else:
            values[key] = observation.value

    if merged:
        logger.debug(
            "Merged duplicate series into one sample each",
            extra={"merged_observations": merged},
        )

    families: list[Metric] = []
    for name, descriptor in descriptors.items():
        family = _new_family(descriptor)
        for label_values, value in series[name].items():
            family.add_metric(list(label_values), value)
        families.append(family)
    return families


def _new_family(descriptor: ModelMetricDescriptor) -> Metric:
    labels = list(descriptor.label_names)
    if descriptor.metric_type is EnumMetricType.COUNTER:
        # The client strips a trailing _total and re-adds it in the exposition
        return CounterMetricFamily(descriptor.name, descriptor.documentation, labels=labels)
    return GaugeMetricFamily(descriptor.name, descriptor.documentation, labels=labels)


class PrometheusBridge:
    """Custom ``prometheus_client`` collector serving the last scrape.

    Example:
        >>> registry = PrometheusRegistry()
        >>> registry.register(PrometheusBridge(runtime))
        >>> render_latest(registry)
    """

    def __init__(self, source: ProtocolObservationSource) -> None:
        self._source = source

    def collect(self) -> Iterator[Metric]:
        yield from observations_to_families(self._source.last_observations())

    def describe(self) -> list[Metric]:
        # An empty description keeps registration from running collect()
        return []


def create_registry(bridge: Collector) -> PrometheusRegistry:
    """Create a dedicated registry holding only ``bridge``."""
    registry = PrometheusRegistry()
    registry.register(bridge)
    return registry


def render_latest(registry: PrometheusRegistry) -> str:
    """Get the registry contents in Prometheus text format."""
    return generate_latest(registry).decode("utf-8")


def start_metrics_server(port: int, registry: PrometheusRegistry) -> None:
    """Start the HTTP metrics server on ``port``.

    Raises:
        OSError: If the port cannot be bound.
    """
    start_http_server(port, registry=registry)
    logger.info("Prometheus metrics server started", extra={"listen_port": port})


__all__ = [
    "SCRAPE_SUBSYSTEM",
    "PrometheusBridge",
    "PrometheusRegistry",
    "ProtocolObservationSource",
    "ScrapeDescriptors",
    "build_scrape_descriptors",
    "create_registry",
    "observations_to_families",
    "render_latest",
    "start_metrics_server",
]
