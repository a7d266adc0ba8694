"""
Rate limiting for the authentication endpoints
Uses in-memory storage with a sliding window
"""
import time
from collections import defaultdict
from typing import Dict, List, Tuple

from fastapi import Request, HTTPException, status

from desiconnect.core.config import settings


class RateLimiter:
    """
    In-memory rate limiter using a sliding window.

    State is per process; multiple workers each keep their own counters.
    """

    def __init__(self, cleanup_interval: int = 60):
        # {identifier: [timestamp, ...]}
        self._requests: Dict[str, List[float]] = defaultdict(list)
        self._last_cleanup = time.time()
        self._cleanup_interval = cleanup_interval

    def _cleanup_old_entries(self, window_seconds: int):
        """Drop identifiers with no requests inside the window"""
        now = time.time()
        if now - self._last_cleanup < self._cleanup_interval:
            return

        cutoff = now - window_seconds
        for identifier in list(self._requests.keys()):
            self._requests[identifier] = [ts for ts in self._requests[identifier] if ts > cutoff]
            if not self._requests[identifier]:
                del self._requests[identifier]

        self._last_cleanup = now

    def is_allowed(self, identifier: str, max_requests: int, window_seconds: int = 60) -> Tuple[bool, int, int]:
        """
        Check if a request is allowed under the rate limit and record it.

        Returns:
            Tuple of (is_allowed, remaining_requests, retry_after_seconds)
        """
        self._cleanup_old_entries(window_seconds)

        if max_requests < 1:
            return False, 0, window_seconds

        now = time.time()
        window_start = now - window_seconds
        in_window = [ts for ts in self._requests[identifier] if ts > window_start]
        self._requests[identifier] = in_window

        if len(in_window) >= max_requests:
            retry_after = int(min(in_window) + window_seconds - now) + 1
            return False, 0, retry_after

        in_window.append(now)
        return True, max_requests - len(in_window), 0

    def reset(self):
        self._requests.clear()


# Global rate limiter instance
rate_limiter = RateLimiter()


def get_client_ip(request: Request) -> str:
    """Get the client IP, considering proxies"""
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        # First IP in the chain is the original client
        return forwarded_for.split(",")[0].strip()
    if request.client:
        return request.client.host
    return "unknown"


async def auth_rate_limit(request: Request):
    """
    Dependency throttling login and password reset per client IP and path.

    Usage:
        @router.post("/seller/login", dependencies=[Depends(auth_rate_limit)])
    """
    limit = settings.AUTH_RATE_LIMIT_PER_MINUTE
    identifier = f"auth:{request.url.path}:{get_client_ip(request)}"

    is_allowed, _, retry_after = rate_limiter.is_allowed(identifier, max_requests=limit, window_seconds=60)
    if not is_allowed:
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail=f"Too many attempts. Try again in {retry_after} seconds.",
            headers={
                "X-RateLimit-Limit": str(limit),
                "X-RateLimit-Remaining": "0",
                "Retry-After": str(retry_after),
            },
        )
