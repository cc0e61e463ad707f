"""
civic.engine.distributor — Batch Distribution
==============================================

Sequential left fold of :func:`next_payout` over an ordered list of user
levels.  Earlier users get first claim on the pool, so the fold is order
dependent and must run serially.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from civic.engine.allocator import AllocationState, next_payout
from civic.engine.table import build_reward_table

if TYPE_CHECKING:
    from collections.abc import Iterable

    from civic.engine.cache import RewardTableCache
    from civic.engine.curve import CurveConfig
    from civic.engine.table import RewardTable

logger = logging.getLogger(__name__)

__all__ = ["distribute", "distribute_with_state"]


def distribute_with_state(
    levels: Iterable[int],
    state: AllocationState,
    table: RewardTable,
) -> list[int]:
    """Pay out each level in order, committing every payout to *state*.

    *state* is left holding the final running total.
    """
    payouts: list[int] = []
    for level in levels:
        payout = next_payout(state, table, level)
        state.apply(payout)
        payouts.append(payout)
    return payouts


def distribute(
    levels: Iterable[int],
    max_cap: int,
    start_distributed: int,
    config: CurveConfig,
    *,
    cache: RewardTableCache | None = None,
) -> list[int]:
    """Payouts for *levels* against a pool capped at *max_cap*.

    Output has the same length and order as *levels*.  A negative
    *start_distributed* counts as 0.

    Raises
    ------
    ConfigError
        If *config* is invalid.
    """
    table = build_reward_table(config, cache=cache)
    state = AllocationState(max_cap=max_cap, distributed=max(0, start_distributed))
    payouts = distribute_with_state(levels, state, table)
    logger.debug(
        "Distributed %d across %d users (pool %d/%d)",
        state.distributed - max(0, start_distributed),
        len(payouts),
        state.distributed,
        max_cap,
    )
    return payouts
