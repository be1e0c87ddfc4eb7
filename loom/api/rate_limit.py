"""Per-client fixed-window request limits for the API routes."""

import time
from typing import Callable, Dict, Tuple

from fastapi import HTTPException, Request

from ..core.logger import get_logger

logger = get_logger(__name__)


class RateLimiter:
    """Allows ``max_requests`` per client in each ``window_seconds`` window."""

    def __init__(
        self,
        max_requests: int,
        window_seconds: float = 60.0,
        message: str = "Too many requests, please try again later",
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.message = message
        self._clock = clock
        # client -> (window start, hits in window)
        self._windows: Dict[str, Tuple[float, int]] = {}

    def hit(self, client: str) -> bool:
        """Record one request; False when the client is over its limit."""
        now = self._clock()
        start, count = self._windows.get(client, (now, 0))
        if now - start >= self.window_seconds:
            start, count = now, 0

        if count >= self.max_requests:
            self._windows[client] = (start, count)
            return False

        self._windows[client] = (start, count + 1)
        if len(self._windows) > 10000:
            self._prune(now)
        return True

    def _prune(self, now: float) -> None:
        self._windows = {
            client: window
            for client, window in self._windows.items()
            if now - window[0] < self.window_seconds
        }

    def reset(self) -> None:
        self._windows.clear()


def client_key(request: Request) -> str:
    return request.client.host if request.client else "unknown"


def limit_with(attribute: str) -> Callable[[Request], None]:
    """FastAPI dependency enforcing the limiter stored on ``app.state.<attribute>``."""

    def dependency(request: Request) -> None:
        limiter: RateLimiter = getattr(request.app.state, attribute)
        client = client_key(request)
        if not limiter.hit(client):
            logger.warning("rate_limited", client=client, path=request.url.path)
            raise HTTPException(status_code=429, detail=limiter.message)

    return dependency


enforce_api_limit = limit_with("api_limiter")
enforce_analyze_limit = limit_with("analyze_limiter")
