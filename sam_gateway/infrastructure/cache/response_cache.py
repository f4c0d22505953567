"""
In-memory cache of raw registry response bodies.

Entries are keyed by operation and normalized parameters and expire lazily
according to the ``CachePolicy`` of the operation's data class.
"""
from __future__ import annotations

import dataclasses
import json
import logging
import random
import threading
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional, TypeVar

from sam_gateway.domain.value_objects.cache_policy import CachePolicy, DataClass

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class CacheEntry:
    response: Any
    stored_at: float
    data_class: DataClass


def _canonical(value: Any) -> Any:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        if hasattr(value, "cache_fields"):
            value = value.cache_fields()
        else:
            value = dataclasses.asdict(value)
    if isinstance(value, Enum):
        value = value.value
    if isinstance(value, Mapping):
        return {
            str(key): _canonical(item)
            for key, item in value.items()
            if item is not None and not (isinstance(item, str) and not item.strip())
        }
    if isinstance(value, (list, tuple)):
        return [_canonical(item) for item in value]
    if isinstance(value, str):
        return value.strip()
    return value


def normalize_cache_key(operation_key: str, params: Any) -> str:
    """
    Build a deterministic key from an operation name and its parameters.

    ``None`` and blank values are dropped, strings are stripped and mapping
    keys are sorted, so equivalent parameters built in any order give the
    same key.

    Examples:
        >>> normalize_cache_key("FindAmp", {"cnk": " 0012345 ", "amp_code": None})
        'FindAmp:{"cnk":"0012345"}'
    """
    payload = _canonical(params) if params is not None else {}
    encoded = json.dumps(payload, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    return f"{operation_key}:{encoded}"


class ResponseCache:
    """Process-local response cache with per-data-class freshness.

    Args:
        policies: Freshness policy per data class.
        max_entries: Capacity; storing beyond it evicts the oldest entry.
        sweep_probability: Fraction of calls that also purge expired entries.
        clock: Monotonic seconds source.
        random_source: Returns a float in [0, 1); drives the sweep.
    """

    def __init__(
        self,
        policies: Mapping[DataClass, CachePolicy],
        max_entries: int = 5000,
        sweep_probability: float = 0.01,
        clock: Optional[Callable[[], float]] = None,
        random_source: Optional[Callable[[], float]] = None,
    ):
        self._policies = dict(policies)
        self._max_entries = max_entries
        self._sweep_probability = sweep_probability
        self._clock = clock or time.monotonic
        self._random = random_source or random.random
        self._entries: Dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    def policy_for(self, data_class: DataClass) -> CachePolicy:
        return self._policies[data_class]

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    async def get_or_fetch(
        self,
        operation_key: str,
        params: Any,
        data_class: DataClass,
        fetch: Callable[[], Awaitable[T]],
    ) -> T:
        """Return the live cached response or fetch, store and return a new one.

        Exceptions raised by ``fetch`` propagate and nothing is stored.
        """
        key = normalize_cache_key(operation_key, params)
        policy = self.policy_for(data_class)

        self._maybe_sweep()

        cached = self._get_live(key, policy)
        if cached is not None:
            logger.debug("Cache hit for %s", operation_key, extra={"operation": operation_key})
            return cached.response

        logger.debug("Cache miss for %s", operation_key, extra={"operation": operation_key})
        response = await fetch()
        self._store(key, CacheEntry(response=response, stored_at=self._clock(), data_class=data_class))
        return response

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def sweep(self) -> int:
        """Remove every expired entry; returns how many were removed."""
        now = self._clock()
        with self._lock:
            expired = [
                key
                for key, entry in self._entries.items()
                if not self._policies[entry.data_class].is_fresh(now - entry.stored_at)
            ]
            for key in expired:
                del self._entries[key]
        if expired:
            logger.debug("Swept %s expired cache entries", len(expired))
        return len(expired)

    def _get_live(self, key: str, policy: CachePolicy) -> Optional[CacheEntry]:
        now = self._clock()
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if policy.is_fresh(now - entry.stored_at):
                return entry
            del self._entries[key]
            return None

    def _store(self, key: str, entry: CacheEntry) -> None:
        with self._lock:
            self._entries.pop(key, None)
            while self._max_entries > 0 and len(self._entries) >= self._max_entries:
                # Dicts keep insertion order, so the first key is the oldest entry.
                oldest = next(iter(self._entries))
                del self._entries[oldest]
            self._entries[key] = entry

    def _maybe_sweep(self) -> None:
        if self._sweep_probability > 0 and self._random() < self._sweep_probability:
            self.sweep()
