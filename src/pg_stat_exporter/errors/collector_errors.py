# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Collector Error Classes.

Error Hierarchy:
    CollectorError (base)
    ├── QueryError
    │   └── QueryTimeoutError
    ├── ScanError
    ├── ResetError
    ├── RegistryError
    ├── ConfigurationError
    ├── InfraConnectionError
    └── InfraAuthenticationError

All errors:
    - Carry an EnumCollectorErrorCode for classification
    - Support error chaining with ``raise ... from e``
    - Accept ModelCollectorErrorContext for bundled structured fields
    - Accept free keyword context (row_index, timeout_seconds, ...)

QueryError and ScanError abort a collection cycle and surface to the scrape
runtime. ResetError is raised internally and never leaves a collector: a
failed reset is logged and the cycle still emits what it read.
"""

from typing import Optional
from uuid import UUID

from pg_stat_exporter.enums import EnumCollectorErrorCode
from pg_stat_exporter.errors.model_collector_error_context import (
    ModelCollectorErrorContext,
)


class CollectorError(Exception):
    """Base error class for exporter errors.

    Structured Fields (via ModelCollectorErrorContext):
        collector: Collector name
        operation: Operation being performed
        target_name: Target resource name
        correlation_id: Collection cycle correlation ID

    Example:
        >>> context = ModelCollectorErrorContext(
        ...     collector="stat_statements",
        ...     operation="query",
        ... )
        >>> raise CollectorError("Operation failed", context=context, attempt=1)
    """

    default_error_code: EnumCollectorErrorCode = EnumCollectorErrorCode.OPERATION_FAILED

    def __init__(
        self,
        message: str,
        error_code: Optional[EnumCollectorErrorCode] = None,
        context: Optional[ModelCollectorErrorContext] = None,
        **extra_context: object,
    ) -> None:
        """Initialize CollectorError with structured fields.

        Args:
            message: Human-readable error message
            error_code: Error code (defaults to the class default)
            context: Bundled collector context
            **extra_context: Additional context information
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.default_error_code

        structured_context: dict[str, object] = dict(extra_context)
        self.correlation_id: Optional[UUID] = None
        if context is not None:
            if context.collector is not None:
                structured_context["collector"] = context.collector
            if context.operation is not None:
                structured_context["operation"] = context.operation
            if context.target_name is not None:
                structured_context["target_name"] = context.target_name
            self.correlation_id = context.correlation_id
        self.context = structured_context

    def to_dict(self) -> dict[str, object]:
        """Return the error as a flat dict suitable for logging extras."""
        result: dict[str, object] = {
            "error_type": type(self).__name__,
            "error_code": self.error_code.value,
            "error_message": self.message,
        }
        if self.correlation_id is not None:
            result["correlation_id"] = str(self.correlation_id)
        result.update(self.context)
        return result


class QueryError(CollectorError):
    """Raised when the statistics query itself fails.

    Covers missing extension or relation, insufficient privileges, lost
    connections and any other server-side failure while executing or
    iterating the query.
    """

    default_error_code = EnumCollectorErrorCode.QUERY_FAILED


class QueryTimeoutError(QueryError):
    """Raised when the collection context deadline passes before or during the query.

    Example:
        >>> raise QueryTimeoutError(
        ...     "Statistics query exceeded deadline",
        ...     context=context,
        ...     timeout_seconds=10.0,
        ... )
    """

    default_error_code = EnumCollectorErrorCode.QUERY_TIMEOUT


class ScanError(CollectorError):
    """Raised when a result row cannot be decoded into the expected shape.

    A NULL column is never a scan error; a missing column or a value of the
    wrong type is.
    """

    default_error_code = EnumCollectorErrorCode.SCAN_FAILED


class ResetError(CollectorError):
    """Raised when the statistics reset command fails."""

    default_error_code = EnumCollectorErrorCode.RESET_FAILED


class RegistryError(CollectorError):
    """Raised when a collector registry operation fails.

    Example:
        >>> registry = CollectorRegistry()
        >>> registry.get("unknown")
        Traceback (most recent call last):
        RegistryError: No collector registered with name: 'unknown'
    """

    default_error_code = EnumCollectorErrorCode.REGISTRY_ERROR

    def __init__(
        self,
        message: str,
        collector_name: Optional[str] = None,
        context: Optional[ModelCollectorErrorContext] = None,
        **extra_context: object,
    ) -> None:
        """Initialize RegistryError.

        Args:
            message: Human-readable error message
            collector_name: The collector name that caused the error
            context: Bundled collector context
            **extra_context: Additional context information
        """
        if collector_name is not None:
            extra_context["collector_name"] = collector_name
        super().__init__(message, context=context, **extra_context)


class ConfigurationError(CollectorError):
    """Raised when exporter configuration is invalid."""

    default_error_code = EnumCollectorErrorCode.INVALID_CONFIGURATION


class InfraConnectionError(CollectorError):
    """Raised when the database cannot be reached."""

    default_error_code = EnumCollectorErrorCode.CONNECTION_ERROR


class InfraAuthenticationError(CollectorError):
    """Raised when the database rejects the configured credentials."""

    default_error_code = EnumCollectorErrorCode.AUTHENTICATION_ERROR


__all__ = [
    "CollectorError",
    "ConfigurationError",
    "InfraAuthenticationError",
    "InfraConnectionError",
    "QueryError",
    "QueryTimeoutError",
    "RegistryError",
    "ResetError",
    "ScanError",
]
