# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Exporter Observability Module.

Exports:
    PrometheusBridge: Custom prometheus_client collector for the last scrape
    build_scrape_descriptors: Per-collector scrape health descriptors
    observations_to_families: Observation to metric family conversion
    create_registry / render_latest / start_metrics_server: Exposition helpers
    configure_logging: Process logging setup
"""

from pg_stat_exporter.observability.logging_config import (
    LOG_LEVEL_ENV,
    configure_logging,
)
from pg_stat_exporter.observability.prometheus_metrics import (
    SCRAPE_SUBSYSTEM,
    PrometheusBridge,
    PrometheusRegistry,
    ProtocolObservationSource,
    ScrapeDescriptors,
    build_scrape_descriptors,
    create_registry,
    observations_to_families,
    render_latest,
    start_metrics_server,
)

__all__ = [
    "LOG_LEVEL_ENV",
    "SCRAPE_SUBSYSTEM",
    "PrometheusBridge",
    "PrometheusRegistry",
    "ProtocolObservationSource",
    "ScrapeDescriptors",
    "build_scrape_descriptors",
    "configure_logging",
    "create_registry",
    "observations_to_families",
    "render_latest",
    "start_metrics_server",
]
