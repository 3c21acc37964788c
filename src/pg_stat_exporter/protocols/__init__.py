# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Exporter Protocols Module.

Protocol conformance is checked by duck typing; concrete classes do not
inherit from these protocols.

Exports:
    ProtocolCollector: Collector driven by the scrape runtime
    ProtocolDatabaseInstance: Source of borrowed asyncpg connections
    ProtocolMetricSink: Awaitable output channel for observations
"""

from pg_stat_exporter.protocols.protocol_collector import ProtocolCollector
from pg_stat_exporter.protocols.protocol_database_instance import (
    ProtocolDatabaseInstance,
)
from pg_stat_exporter.protocols.protocol_metric_sink import ProtocolMetricSink

__all__ = [
    "ProtocolCollector",
    "ProtocolDatabaseInstance",
    "ProtocolMetricSink",
]
