"""Request dispatching (availability probe, rate limiting, GUI interaction)."""

from .availability import AvailabilityProber
from .dispatcher import REPLY_FALLBACK, RequestDispatcher
from .rate_limiter import DEFAULT_INTERVAL_MS, RateLimiter

__all__ = [
    "AvailabilityProber",
    "DEFAULT_INTERVAL_MS",
    "REPLY_FALLBACK",
    "RateLimiter",
    "RequestDispatcher",
]
