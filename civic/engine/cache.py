"""
civic.engine.cache — In-Memory Reward Table Cache
==================================================

Reward tables are requested repeatedly (every preview render, every payout
run) with a small set of distinct configs.  This module keeps built tables
in a bounded LRU map keyed by :attr:`CurveConfig.key`.

The cache is an explicit object: callers own it and pass it in.  A
process-wide default exists for production wiring; tests inject their own.
"""

from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from collections.abc import Callable
from typing import TYPE_CHECKING

from civic.constants import DEFAULT_CACHE_MAX_ENTRIES

if TYPE_CHECKING:
    from civic.engine.curve import CurveConfig
    from civic.engine.table import RewardTable

logger = logging.getLogger(__name__)

CacheKey = tuple[int, str, int, int, int]


class RewardTableCache:
    """Thread-safe LRU cache of immutable :class:`RewardTable` instances.

    Tables are never mutated after insertion, so readers only contend on
    the map itself.

    Usage:
        cache = RewardTableCache(max_entries=64)
        table = build_reward_table(config, cache=cache)
        same = build_reward_table(config, cache=cache)   # same instance
    """

    def __init__(self, max_entries: int = DEFAULT_CACHE_MAX_ENTRIES) -> None:
        if max_entries < 1:
            raise ValueError(f"max_entries must be >= 1, got {max_entries}")
        self._max_entries = max_entries
        self._lock = threading.Lock()
        # CurveConfig.key → RewardTable, least recently used first
        self._tables: OrderedDict[CacheKey, RewardTable] = OrderedDict()
        self._hits = 0
        self._misses = 0

    # -------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------
    def get(self, config: CurveConfig) -> RewardTable | None:
        """Return the cached table for *config*, or None."""
        key = config.key
        with self._lock:
            table = self._tables.get(key)
            if table is not None:
                self._tables.move_to_end(key)
            return table

    def get_or_build(
        self,
        config: CurveConfig,
        build: Callable[[CurveConfig], RewardTable],
    ) -> RewardTable:
        """Return the cached table for *config*, building it on a miss.

        *build* runs under the lock, so two threads missing on the same key
        never produce two different instances.
        """
        key = config.key
        with self._lock:
            table = self._tables.get(key)
            if table is not None:
                self._hits += 1
                self._tables.move_to_end(key)
                return table

            self._misses += 1
            table = build(config)
            self._tables[key] = table
            if len(self._tables) > self._max_entries:
                evicted, _ = self._tables.popitem(last=False)
                logger.debug("Evicted reward table %s", evicted)
            return table

    def clear(self) -> None:
        with self._lock:
            self._tables.clear()
            self._hits = 0
            self._misses = 0

    # -------------------------------------------------------------------
    # Introspection
    # -------------------------------------------------------------------
    @property
    def max_entries(self) -> int:
        return self._max_entries

    @property
    def hits(self) -> int:
        with self._lock:
            return self._hits

    @property
    def misses(self) -> int:
        with self._lock:
            return self._misses

    def __len__(self) -> int:
        with self._lock:
            return len(self._tables)

    def __contains__(self, config: object) -> bool:
        key = getattr(config, "key", None)
        if key is None:
            return False
        with self._lock:
            return key in self._tables


# Module-level default instance (tests can inject their own)
_default_cache: RewardTableCache | None = None
_default_lock = threading.Lock()


def get_default_cache() -> RewardTableCache:
    """Return (or create) the process-wide RewardTableCache."""
    global _default_cache
    if _default_cache is None:
        with _default_lock:
            if _default_cache is None:
                _default_cache = RewardTableCache()
    return _default_cache
