# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Collector Error Code Enumeration."""

from enum import Enum


class EnumCollectorErrorCode(str, Enum):
    """Error classification codes carried by every CollectorError."""

    OPERATION_FAILED = "operation_failed"
    QUERY_FAILED = "query_failed"
    QUERY_TIMEOUT = "query_timeout"
    SCAN_FAILED = "scan_failed"
    RESET_FAILED = "reset_failed"
    REGISTRY_ERROR = "registry_error"
    INVALID_CONFIGURATION = "invalid_configuration"
    CONNECTION_ERROR = "connection_error"
    AUTHENTICATION_ERROR = "authentication_error"


__all__ = ["EnumCollectorErrorCode"]
