"""Rate limit tracking for the GitHub API.

The executor consults the tracked window before each request so that
requests known to be rejected are not sent.
"""

from .schemas import RateLimitStatus, RateLimitWindow
from .tracker import RateLimitTracker

__all__ = [
    "RateLimitStatus",
    "RateLimitTracker",
    "RateLimitWindow",
]
