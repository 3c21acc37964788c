# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Metric Type Enumeration."""

from enum import Enum


class EnumMetricType(str, Enum):
    """Prometheus value types emitted by collectors.

    Attributes:
        COUNTER: Monotonically non-decreasing value
        GAUGE: Point-in-time value that may go up or down
    """

    COUNTER = "counter"
    GAUGE = "gauge"


__all__ = ["EnumMetricType"]
