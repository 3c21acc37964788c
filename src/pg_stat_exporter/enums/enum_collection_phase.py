# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Collection Phase Enumeration.

Phases of a single collection cycle. Read-only collectors move through
IDLE -> QUERYING -> EMITTING -> IDLE; reset-after-read collectors move
through IDLE -> QUERYING -> BUFFERING -> RESETTING -> EMITTING -> IDLE.
A failure while querying or buffering returns straight to IDLE.
"""

from enum import Enum


class EnumCollectionPhase(str, Enum):
    """Collection cycle phases."""

    IDLE = "idle"
    QUERYING = "querying"
    BUFFERING = "buffering"
    RESETTING = "resetting"
    EMITTING = "emitting"


__all__ = ["EnumCollectionPhase"]
