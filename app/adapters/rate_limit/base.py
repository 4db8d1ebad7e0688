"""Rate limiter interfaces.

The HTTP layer depends on this abstraction, not on the counter store that
backs a concrete limiter.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class RateLimitResult:
    """Result of an admit operation.

    Attributes:
        allowed: Whether the request is allowed to proceed.
        limit: Max requests per window.
        count: Requests observed in the current window, this one included.
        remaining: max(0, limit - count).
        degraded: True when the counter store was unreachable and the
            request was admitted without counting.
    """

    allowed: bool
    limit: int
    count: int
    remaining: int
    degraded: bool = False


class AbstractRateLimiter(ABC):
    """Interface for rate limiters."""

    @abstractmethod
    async def admit(self, key: str) -> RateLimitResult:
        """Count one request for key and decide whether it may proceed.

        Args:
            key: Unique identifier for the budget (e.g., tenant id).

        Returns:
            RateLimitResult describing whether it was allowed.
        """
        raise NotImplementedError
