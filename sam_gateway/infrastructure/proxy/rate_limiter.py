"""Fixed-window request limiter keyed by client."""
from __future__ import annotations

import logging
import random
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Mapping, Optional

from sam_gateway.domain.exceptions import RateLimitExceeded

logger = logging.getLogger(__name__)

CLIENT_KEY_PREFIX = "doc-proxy:"


@dataclass
class RateLimitRecord:
    count: int
    reset_at: float


@dataclass(frozen=True)
class RateLimitDecision:
    remaining: int
    reset_at: float


def client_key_from_headers(headers: Mapping[str, str], peer_host: Optional[str] = None) -> str:
    """First ``X-Forwarded-For`` entry, else the peer host, else ``unknown``."""
    forwarded_for = headers.get("x-forwarded-for") or headers.get("X-Forwarded-For") or ""
    client = forwarded_for.split(",")[0].strip() or (peer_host or "").strip() or "unknown"
    return f"{CLIENT_KEY_PREFIX}{client}"


class RateLimiter:
    """Allow ``max_requests`` per ``window_seconds`` for each key.

    Args:
        clock: Monotonic seconds source.
        random_source: Returns a float in [0, 1); drives pruning of
            expired records.
    """

    def __init__(
        self,
        max_requests: int = 30,
        window_seconds: int = 60,
        sweep_probability: float = 0.01,
        clock: Optional[Callable[[], float]] = None,
        random_source: Optional[Callable[[], float]] = None,
    ):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._sweep_probability = sweep_probability
        self._clock = clock or time.monotonic
        self._random = random_source or random.random
        self._records: Dict[str, RateLimitRecord] = {}
        self._lock = threading.Lock()

    def check(self, key: str) -> RateLimitDecision:
        """Count one request for ``key``.

        Raises:
            RateLimitExceeded: The key already used its allowance in the
                current window.
        """
        now = self._clock()
        with self._lock:
            if self._sweep_probability > 0 and self._random() < self._sweep_probability:
                self._prune(now)

            record = self._records.get(key)
            if record is None or record.reset_at <= now:
                record = RateLimitRecord(count=1, reset_at=now + self.window_seconds)
                self._records[key] = record
                return RateLimitDecision(remaining=self.max_requests - 1, reset_at=record.reset_at)

            if record.count >= self.max_requests:
                logger.info("Rate limit exceeded", extra={"client_key": key})
                raise RateLimitExceeded(retry_after=self.window_seconds)

            record.count += 1
            return RateLimitDecision(remaining=self.max_requests - record.count, reset_at=record.reset_at)

    def _prune(self, now: float) -> None:
        expired = [key for key, record in self._records.items() if record.reset_at <= now]
        for key in expired:
            del self._records[key]
