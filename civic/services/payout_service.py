"""
civic.services.payout_service — Pool Payout Execution
======================================================

Runs a batch distribution against a pool whose running total lives in an
external ledger, then hands the new total back to that ledger.

The ledger is the source of truth for ``start_distributed``.  Runs against
the same pool are serialized with a per-pool lock because the allocator's
``distributed <= max_cap`` guarantee depends on strictly sequential updates.
"""

from __future__ import annotations

import logging
import threading
from collections import defaultdict
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol

from civic.engine.allocator import AllocationState
from civic.engine.cache import get_default_cache
from civic.engine.distributor import distribute_with_state
from civic.engine.table import build_reward_table

if TYPE_CHECKING:
    from collections.abc import Sequence

    from civic.engine.cache import RewardTableCache
    from civic.engine.curve import CurveConfig

logger = logging.getLogger(__name__)


class PoolLedger(Protocol):
    """Backing store for pool running totals."""

    def get_distributed(self, pool_id: str) -> int: ...

    def commit(self, pool_id: str, distributed: int, payouts: list[int]) -> None: ...


@dataclass(frozen=True)
class PayoutResult:
    """Outcome of one payout run."""

    pool_id: str
    payouts: list[int] = field(default_factory=list)
    start_distributed: int = 0
    distributed: int = 0
    exhausted: bool = False

    @property
    def total_paid(self) -> int:
        return self.distributed - self.start_distributed


class InMemoryLedger:
    """Process-local ledger.  Keeps every committed payout batch per pool."""

    def __init__(self, initial: dict[str, int] | None = None) -> None:
        self._lock = threading.Lock()
        self._distributed: dict[str, int] = dict(initial or {})
        self._history: dict[str, list[list[int]]] = defaultdict(list)

    def get_distributed(self, pool_id: str) -> int:
        with self._lock:
            return self._distributed.get(pool_id, 0)

    def commit(self, pool_id: str, distributed: int, payouts: list[int]) -> None:
        with self._lock:
            if distributed < self._distributed.get(pool_id, 0):
                raise ValueError(
                    f"Pool {pool_id}: distributed total cannot decrease "
                    f"({self._distributed[pool_id]} → {distributed})"
                )
            self._distributed[pool_id] = distributed
            self._history[pool_id].append(list(payouts))

    def history(self, pool_id: str) -> list[list[int]]:
        with self._lock:
            return [list(batch) for batch in self._history.get(pool_id, [])]


class PayoutService:
    """Executes ordered payout batches, one at a time per pool.

    Tables come from *cache*, or from the process-wide default cache when
    none is given.

    Usage:
        service = PayoutService(ledger)
        result = service.run("poll-42", [3, 1, 10], max_cap=500_000, config=cfg)
    """

    def __init__(
        self, ledger: PoolLedger, cache: RewardTableCache | None = None
    ) -> None:
        self._ledger = ledger
        self._cache = cache if cache is not None else get_default_cache()
        self._locks_guard = threading.Lock()
        self._pool_locks: dict[str, threading.Lock] = {}

    def _lock_for(self, pool_id: str) -> threading.Lock:
        with self._locks_guard:
            lock = self._pool_locks.get(pool_id)
            if lock is None:
                lock = self._pool_locks[pool_id] = threading.Lock()
            return lock

    def run(
        self,
        pool_id: str,
        levels: Sequence[int],
        max_cap: int,
        config: CurveConfig,
    ) -> PayoutResult:
        """Pay out *levels* in order from pool *pool_id*.

        The table is built before the ledger is touched, so an invalid
        *config* raises :class:`ConfigError` without side effects.
        """
        table = build_reward_table(config, cache=self._cache)

        with self._lock_for(pool_id):
            start = max(0, self._ledger.get_distributed(pool_id))
            state = AllocationState(max_cap=max_cap, distributed=start)
            payouts = distribute_with_state(levels, state, table)
            self._ledger.commit(pool_id, state.distributed, payouts)

        result = PayoutResult(
            pool_id=pool_id,
            payouts=payouts,
            start_distributed=start,
            distributed=state.distributed,
            exhausted=state.exhausted,
        )
        logger.info(
            "Pool %s: paid %d to %d users (%d/%d distributed%s)",
            pool_id,
            result.total_paid,
            len(payouts),
            result.distributed,
            max_cap,
            ", exhausted" if result.exhausted else "",
        )
        return result
