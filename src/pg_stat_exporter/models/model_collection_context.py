# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Collection Context Model.

Carries the deadline and cancellation state of one collection cycle. The
reader and the reset command both derive their statement timeout from the
remaining time, so an external deadline aborts promptly instead of holding a
server-side cursor open.
"""

import time
from typing import Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field


class ModelCollectionContext(BaseModel):
    """Deadline and cancellation state for a single collection cycle.

    Attributes:
        correlation_id: Cycle correlation ID for logs and errors
        deadline: Absolute deadline on the time.monotonic() clock, or None
        cancelled: True once the caller has cancelled the cycle

    Example:
        >>> context = ModelCollectionContext.with_timeout(10.0)
        >>> context.remaining_seconds() <= 10.0
        True
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )

    correlation_id: UUID = Field(default_factory=uuid4)
    deadline: Optional[float] = Field(default=None)
    cancelled: bool = Field(default=False)

    @classmethod
    def with_timeout(
        cls, timeout_seconds: float, correlation_id: Optional[UUID] = None
    ) -> "ModelCollectionContext":
        """Create a context that expires ``timeout_seconds`` from now."""
        return cls(
            correlation_id=correlation_id or uuid4(),
            deadline=time.monotonic() + timeout_seconds,
        )

    def as_cancelled(self) -> "ModelCollectionContext":
        """Return a copy of this context marked as cancelled."""
        return self.model_copy(update={"cancelled": True})

    def remaining_seconds(self) -> Optional[float]:
        """Return seconds left before the deadline (never negative), or None."""
        if self.deadline is None:
            return None
        return max(0.0, self.deadline - time.monotonic())

    def is_expired(self) -> bool:
        if self.cancelled:
            return True
        if self.deadline is None:
            return False
        return time.monotonic() >= self.deadline


__all__ = ["ModelCollectionContext"]
