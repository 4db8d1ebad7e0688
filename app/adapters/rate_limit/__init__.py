"""Rate limiting adapters.

This package keeps the HTTP layer independent of the limiter algorithm and
of the counter store that backs it.
"""

from app.adapters.rate_limit.base import AbstractRateLimiter, RateLimitResult
from app.adapters.rate_limit.fixed_window import FixedWindowRateLimiter

__all__ = [
    "AbstractRateLimiter",
    "FixedWindowRateLimiter",
    "RateLimitResult",
]
