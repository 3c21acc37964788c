# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Unit tests for the Prometheus bridge and exposition helpers."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest
from prometheus_client.core import CounterMetricFamily, GaugeMetricFamily

from pg_stat_exporter.collectors import build_stat_statements_descriptors
from pg_stat_exporter.enums import EnumMetricType
from pg_stat_exporter.models import ModelMetricObservation
from pg_stat_exporter.observability import (
    PrometheusBridge,
    PrometheusRegistry,
    build_scrape_descriptors,
    create_registry,
    observations_to_families,
    render_latest,
    start_metrics_server,
)


class _StaticSource:
    def __init__(self, observations: list[ModelMetricObservation]) -> None:
        self.observations = observations
        self.calls = 0

    def last_observations(self) -> list[ModelMetricObservation]:
        self.calls += 1
        return self.observations


def _statement_observations(statement: str, values: list[float]) -> list[ModelMetricObservation]:
    descriptors = build_stat_statements_descriptors()
    return [
        ModelMetricObservation(
            descriptor=descriptor,
            value=value,
            label_values=("app", "prod", statement),
        )
        for descriptor, value in zip(descriptors, values)
    ]


class TestScrapeDescriptors:
    """Tests for build_scrape_descriptors."""

    def test_names_and_labels(self) -> None:
        descriptors = build_scrape_descriptors()

        assert descriptors.success.name == "pg_scrape_collector_success"
        assert descriptors.duration_seconds.name == "pg_scrape_collector_duration_seconds"
        assert descriptors.success.label_names == ("collector",)
        assert descriptors.success.metric_type is EnumMetricType.GAUGE


class TestObservationsToFamilies:
    """Tests for grouping observations into metric families."""

    def test_groups_by_descriptor(self) -> None:
        observations = _statement_observations(
            "SELECT 1", [42, 0.01, 0.02, 1, 0.001, 0]
        ) + _statement_observations("SELECT 2", [1, 0.5, 0.5, 3, 0, 0])

        families = observations_to_families(observations)

        assert len(families) == 6
        assert all(isinstance(f, CounterMetricFamily) for f in families)
        calls = families[0]
        assert calls.name == "pg_stat_statements_calls"
        assert [s.value for s in calls.samples] == [42.0, 1.0]
        assert calls.samples[0].labels == {
            "user": "app",
            "datname": "prod",
            "query": "SELECT 1",
        }

    def test_gauge_descriptors_become_gauge_families(self) -> None:
        descriptors = build_scrape_descriptors()
        observation = ModelMetricObservation(
            descriptor=descriptors.success, value=1.0, label_values=("stat_statements",)
        )

        [family] = observations_to_families([observation])

        assert isinstance(family, GaugeMetricFamily)
        assert family.samples[0].value == 1.0

    def test_duplicate_series_are_summed(self) -> None:
        observations = (
            _statement_observations("SELECT 1", [40, 0.01, 0.02, 1, 0.001, 0])
            + _statement_observations("SELECT 2", [1, 0.5, 0.5, 3, 0, 0])
            + _statement_observations("SELECT 1", [2, 0.01, 0.03, 4, 0.002, 0])
        )

        families = observations_to_families(observations)

        calls, _mean, _max, rows = families[:4]
        assert [s.labels["query"] for s in calls.samples] == ["SELECT 1", "SELECT 2"]
        assert [s.value for s in calls.samples] == [42.0, 1.0]
        assert [s.value for s in rows.samples] == [5.0, 3.0]

    def test_duplicate_series_render_once(self) -> None:
        source = _StaticSource(
            _statement_observations("SELECT 1", [1] * 6)
            + _statement_observations("SELECT 1", [1] * 6)
        )

        text = render_latest(create_registry(PrometheusBridge(source)))

        series = 'pg_stat_statements_calls_total{datname="prod",query="SELECT 1",user="app"}'
        assert text.count(series) == 1
        assert f"{series} 2.0" in text

    def test_empty_observations(self) -> None:
        assert observations_to_families([]) == []


class TestPrometheusBridge:
    """Tests for the custom collector and text exposition."""

    def test_describe_does_not_read_observations(self) -> None:
        source = _StaticSource([])
        bridge = PrometheusBridge(source)

        create_registry(bridge)

        assert bridge.describe() == []
        assert source.calls == 0

    def test_render_counters_with_total_suffix(self) -> None:
        source = _StaticSource(
            _statement_observations("SELECT 1", [42, 0.01, 0.02, 1, 0.001, 0])
        )

        text = render_latest(create_registry(PrometheusBridge(source)))

        assert "# HELP pg_stat_statements_calls_total Number of times executed" in text
        assert "# TYPE pg_stat_statements_calls_total counter" in text
        assert (
            'pg_stat_statements_calls_total{datname="prod",query="SELECT 1",user="app"} 42.0'
            in text
        )
        assert (
            'pg_stat_statements_block_write_seconds_total{datname="prod",query="SELECT 1",user="app"} 0.0'
            in text
        )

    def test_collect_reflects_latest_snapshot(self) -> None:
        source = _StaticSource(_statement_observations("SELECT 1", [1] * 6))
        registry = create_registry(PrometheusBridge(source))

        assert 'query="SELECT 1"' in render_latest(registry)

        source.observations = []

        assert 'query="SELECT 1"' not in render_latest(registry)


class TestStartMetricsServer:
    """Tests for start_metrics_server."""

    def test_starts_http_server_with_registry(self) -> None:
        registry = PrometheusRegistry()

        with patch(
            "pg_stat_exporter.observability.prometheus_metrics.start_http_server"
        ) as mock_start:
            start_metrics_server(9187, registry)

        mock_start.assert_called_once_with(9187, registry=registry)

    def test_bind_failure_propagates(self) -> None:
        with patch(
            "pg_stat_exporter.observability.prometheus_metrics.start_http_server",
            MagicMock(side_effect=OSError("Address already in use")),
        ):
            with pytest.raises(OSError):
                start_metrics_server(9187, PrometheusRegistry())
