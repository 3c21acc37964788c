# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Exporter Errors Module.

Exports:
    ModelCollectorErrorContext: Bundled structured error context
    CollectorError: Base error class
    QueryError / QueryTimeoutError: Statistics query failures
    ScanError: Row decoding failures
    ResetError: Statistics reset failures (logged, never propagated)
    RegistryError: Collector registry failures
    ConfigurationError: Invalid exporter configuration
    InfraConnectionError / InfraAuthenticationError: Pool initialization failures

Error Sanitization Guidelines:
    Never include DSNs, passwords or statement parameters in messages or
    context. Collector names, operation names, row indexes and correlation
    IDs are safe.
"""

from pg_stat_exporter.errors.collector_errors import (
    CollectorError,
    ConfigurationError,
    InfraAuthenticationError,
    InfraConnectionError,
    QueryError,
    QueryTimeoutError,
    RegistryError,
    ResetError,
    ScanError,
)
from pg_stat_exporter.errors.model_collector_error_context import (
    ModelCollectorErrorContext,
)

__all__ = [
    "CollectorError",
    "ConfigurationError",
    "InfraAuthenticationError",
    "InfraConnectionError",
    "ModelCollectorErrorContext",
    "QueryError",
    "QueryTimeoutError",
    "RegistryError",
    "ResetError",
    "ScanError",
]
