# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Statement Label Enumeration.

Selects which pg_stat_statements column identifies a statement in the
emitted time series.
"""

from enum import Enum


class EnumStatementLabel(str, Enum):
    """Statement identifier variants.

    The enum value doubles as the Prometheus label name.

    Attributes:
        QUERY: Normalized statement text (pg_stat_statements.query)
        QUERY_ID: Stable statement hash (pg_stat_statements.queryid)
    """

    QUERY = "query"
    QUERY_ID = "queryid"


__all__ = ["EnumStatementLabel"]
