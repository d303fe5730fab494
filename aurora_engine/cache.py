"""
Decision cache: an external collaborator for the serving layer.

The engine itself has no cache awareness. Serving code memoizes decisions
per hour: ADS values for a given window are stable for that hour once the
planetary-index data has round-tripped, so a decision keyed by
(horizon-start hour, location) can be reused until its TTL expires.

``DecisionCache`` is an in-memory TTL map with get/set/evict semantics,
hit/miss counters, and a bounded size (oldest entry evicted first). The clock
is injectable so expiry can be tested without sleeping.

``compute_decision_cached()`` wires the cache around the pure pipeline.
"""

from __future__ import annotations

import logging
import threading
import time
from collections import OrderedDict
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Callable, Optional, Sequence

from aurora_engine.engine.pipeline import compute_decision
from aurora_engine.models.decision import Decision
from aurora_engine.models.window import RawWindow
from aurora_engine.utils.time_utils import floor_to_hour, parse_timestamp

if TYPE_CHECKING:
    from aurora_engine.config import CacheConfig

logger = logging.getLogger(__name__)

CacheKey = tuple[str, str]


def cache_key(horizon_start: datetime, location: str) -> CacheKey:
    """Build the cache key: horizon start floored to the UTC hour, plus location.

    The start is converted to UTC first, so one instant written with different
    offsets maps to one key. Naive starts are taken as UTC.
    """
    start = parse_timestamp(horizon_start).astimezone(timezone.utc)
    return (floor_to_hour(start).isoformat(), location)


class DecisionCache:
    """Thread-safe in-memory TTL cache of :class:`Decision` values.

    Args:
        ttl_seconds: Lifetime of an entry.
        max_entries: Upper bound on stored entries; the oldest is evicted
                     when a new key would exceed it.
        clock:       Monotonic seconds source (injectable for tests).
    """

    def __init__(
        self,
        ttl_seconds: float = 3600.0,
        max_entries: int = 256,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if ttl_seconds <= 0:
            raise ValueError(f"ttl_seconds must be > 0, got {ttl_seconds}.")
        if max_entries < 1:
            raise ValueError(f"max_entries must be >= 1, got {max_entries}.")
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock
        self._entries: OrderedDict[CacheKey, tuple[float, Decision]] = OrderedDict()
        self._lock = threading.Lock()
        self._stats = {"hits": 0, "misses": 0}

    @classmethod
    def from_config(
        cls,
        config: "CacheConfig",
        clock: Callable[[], float] = time.monotonic,
    ) -> "DecisionCache":
        """Build a cache from the ``[cache]`` config section."""
        return cls(
            ttl_seconds=config.ttl_seconds,
            max_entries=config.max_entries,
            clock=clock,
        )

    def get(self, key: CacheKey) -> Optional[Decision]:
        """Return the cached decision, or ``None`` if missing or expired."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self._stats["misses"] += 1
                return None

            stored_at, decision = entry
            if self._clock() - stored_at >= self.ttl_seconds:
                del self._entries[key]
                self._stats["misses"] += 1
                logger.debug("Cache expired for %s", key)
                return None

            self._stats["hits"] += 1
            return decision

    def set(self, key: CacheKey, decision: Decision) -> None:
        """Store ``decision`` under ``key``, replacing any previous value."""
        with self._lock:
            if key in self._entries:
                del self._entries[key]
            elif len(self._entries) >= self.max_entries:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug("Cache full; evicted %s", evicted)
            self._entries[key] = (self._clock(), decision)

    def evict(self, key: CacheKey) -> bool:
        """Remove ``key``. Returns ``True`` if an entry was removed."""
        with self._lock:
            return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def stats(self) -> dict[str, int]:
        """Hit/miss counters plus the current entry count."""
        with self._lock:
            return {**self._stats, "entries": len(self._entries)}

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


def compute_decision_cached(
    raws:     Sequence[RawWindow],
    cache:    DecisionCache,
    location: str,
    **kwargs,
) -> Decision:
    """Return the cached decision for this horizon, computing it on a miss.

    The horizon start is the first raw window whose timestamp parses. If none
    parses, the pure pipeline runs uncached and raises as usual.

    Args:
        raws:     Raw windows in chronological order.
        cache:    Cache to consult and fill.
        location: Location identifier forming half of the key.
        **kwargs: Forwarded to :func:`compute_decision`.
    """
    start = _horizon_start(raws)
    if start is None:
        return compute_decision(raws, **kwargs)

    key = cache_key(start, location)
    cached = cache.get(key)
    if cached is not None:
        logger.debug("Cache hit for %s", key)
        return cached

    decision = compute_decision(raws, **kwargs)
    cache.set(key, decision)
    return decision


def _horizon_start(raws: Sequence[RawWindow]) -> Optional[datetime]:
    for raw in raws:
        try:
            return parse_timestamp(raw.timestamp)
        except ValueError:
            continue
    return None
