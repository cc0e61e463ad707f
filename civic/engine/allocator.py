"""
civic.engine.allocator — Capped Payout Allocation
==================================================

Pure allocation step against a shared, capped reward pool.
No ledger I/O inside the engine.

Pipeline for one payout:
  remaining → clamp level → ideal reward → floor search → dust
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from civic.engine.table import RewardTable, build_reward_table

if TYPE_CHECKING:
    from collections.abc import Sequence

    from civic.engine.cache import RewardTableCache
    from civic.engine.curve import CurveConfig

logger = logging.getLogger(__name__)

__all__ = [
    "AllocationState",
    "compute_user_reward",
    "find_floor_reward",
    "next_payout",
]


# ---------------------------------------------------------------------------
# AllocationState — running total of one pool
# ---------------------------------------------------------------------------
@dataclass
class AllocationState:
    """Mutable pool state owned by exactly one distribution run.

    ``distributed`` only increases and never passes ``max_cap``.
    """

    max_cap: int
    distributed: int = 0

    @property
    def remaining(self) -> int:
        return max(0, self.max_cap - self.distributed)

    @property
    def exhausted(self) -> bool:
        return self.remaining == 0

    def apply(self, payout: int) -> None:
        """Commit *payout* to the running total."""
        if payout < 0:
            raise ValueError(f"Payout must be non-negative, got {payout}")
        if payout > self.remaining:
            raise ValueError(
                f"Payout {payout} exceeds remaining pool {self.remaining}"
            )
        self.distributed += payout


# ---------------------------------------------------------------------------
# Stage: floor search
# ---------------------------------------------------------------------------
def find_floor_reward(
    rewards: Sequence[int], remaining: int, level: int
) -> int | None:
    """Largest reward ``<= remaining`` among levels ``1..level``.

    *rewards* must be non-decreasing.  Returns None if even level 1 is
    too large.
    """
    lo, hi = 0, level - 1
    found: int | None = None
    while lo <= hi:
        mid = (lo + hi) // 2
        if rewards[mid] <= remaining:
            found = rewards[mid]
            lo = mid + 1
        else:
            hi = mid - 1
    return found


# ---------------------------------------------------------------------------
# Full allocation step
# ---------------------------------------------------------------------------
def next_payout(state: AllocationState, table: RewardTable, level: int) -> int:
    """Payout for one user at *level* given the pool in *state*.

    This is a PURE function — *state* is not modified.  The caller commits
    the result with :meth:`AllocationState.apply`.

    Returns 0 when the pool is exhausted.  When the ideal reward would
    overdraw the pool, falls back to the largest lower-level reward that
    fits, and finally to the exact remainder.
    """
    remaining = state.remaining
    if remaining == 0:
        return 0

    level = table.clamp_level(level)
    ideal = table.rewards[level - 1]
    if remaining >= ideal:
        return ideal

    fallback = find_floor_reward(table.rewards, remaining, level)
    if fallback is not None:
        logger.debug(
            "Level %d reward %d exceeds remaining %d; falling back to %d",
            level, ideal, remaining, fallback,
        )
        return fallback

    logger.debug("Remaining %d below every reward; paying out dust", remaining)
    return remaining


def compute_user_reward(
    max_cap: int,
    current_distribution: int,
    level: int,
    config: CurveConfig,
    *,
    cache: RewardTableCache | None = None,
) -> int:
    """One-shot payout for a single user.

    Builds (or fetches from *cache*) the table for *config*, then runs
    :func:`next_payout` against ``(max_cap, current_distribution)``.
    """
    table = build_reward_table(config, cache=cache)
    state = AllocationState(max_cap=max_cap, distributed=current_distribution)
    return next_payout(state, table, level)
