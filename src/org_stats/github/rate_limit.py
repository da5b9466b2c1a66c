"""Track the remaining API quota reported on every response."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

import httpx

logger = logging.getLogger(__name__)


class RateLimitMonitor:
    """Records the ``X-RateLimit-*`` headers of the latest response.

    The monitor never delays requests; the page caps on commits and pull
    requests are the only throttling. It warns once when the quota drops to
    ``threshold`` so a user can tell why later requests start failing.
    """

    def __init__(self, threshold: int = 50) -> None:
        self._threshold = threshold
        self._remaining: int | None = None
        self._limit: int | None = None
        self._reset_at: datetime | None = None
        self._warned = False

    @property
    def remaining(self) -> int | None:
        return self._remaining

    @property
    def reset_at(self) -> datetime | None:
        return self._reset_at

    def update(self, response: httpx.Response) -> None:
        remaining = response.headers.get("X-RateLimit-Remaining")
        limit = response.headers.get("X-RateLimit-Limit")
        reset = response.headers.get("X-RateLimit-Reset")

        if remaining is not None:
            self._remaining = int(remaining)
        if limit is not None:
            self._limit = int(limit)
        if reset is not None:
            self._reset_at = datetime.fromtimestamp(float(reset), tz=timezone.utc)

        if self.is_low() and not self._warned:
            self._warned = True
            logger.warning(
                "GitHub API quota nearly exhausted: %s/%s requests left, resets at %s",
                self._remaining,
                self._limit if self._limit is not None else "?",
                self._reset_at.isoformat() if self._reset_at else "unknown",
            )

    def is_low(self) -> bool:
        return self._remaining is not None and self._remaining <= self._threshold
