"""
civic.engine.table — Reward Table Builder
==========================================

Scales the score curve so the anchor level pays exactly ``per_user_reward``::

    reward(level) = per_user_reward * score(level) // score(anchor)

Anchor is level 1 for ``AnchorType.MIN`` and the top level for
``AnchorType.MAX``.  Any positive target clamps every level to at least 1.

Tables are memoized through an injected :class:`RewardTableCache`; passing
``cache=None`` always builds a fresh table.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from civic.constants import DEFAULT_BASE_SCORE, DEFAULT_EXPONENT
from civic.engine.curve import AnchorType, CurveConfig, score_for_level

if TYPE_CHECKING:
    from civic.engine.cache import RewardTableCache

logger = logging.getLogger(__name__)

__all__ = [
    "RewardTable",
    "build_reward_table",
    "reward_for_level_anchored_at_base",
    "reward_for_level_anchored_at_top",
]


# ---------------------------------------------------------------------------
# RewardTable — immutable per-level schedule
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class RewardTable:
    """Per-level rewards for one :class:`CurveConfig`.

    ``rewards[0]`` is level 1.  Non-decreasing by construction.
    """

    config: CurveConfig
    rewards: tuple[int, ...]

    @property
    def total_levels(self) -> int:
        return len(self.rewards)

    @property
    def min_reward(self) -> int:
        return self.rewards[0]

    @property
    def max_reward(self) -> int:
        return self.rewards[-1]

    def clamp_level(self, level: int) -> int:
        return max(1, min(int(level), self.total_levels))

    def reward_for_level(self, level: int) -> int:
        """Reward at *level*, clamped into ``[1, total_levels]``."""
        return self.rewards[self.clamp_level(level) - 1]

    def rows(self) -> list[tuple[int, int]]:
        """``(level, reward)`` pairs for display collaborators."""
        return [(idx + 1, reward) for idx, reward in enumerate(self.rewards)]


def _compute_table(config: CurveConfig) -> RewardTable:
    """Build the table for an already-validated *config*."""
    denom = score_for_level(config.anchor_level, config.base_score, config.exponent)
    if denom == 0:
        denom = 1

    target = config.per_user_reward
    rewards: list[int] = []
    for level in range(1, config.total_levels + 1):
        if target == 0:
            rewards.append(0)
            continue
        score = score_for_level(level, config.base_score, config.exponent)
        rewards.append(max(1, target * score // denom))

    logger.debug(
        "Built reward table: levels=%d anchor=%s target=%d min=%d max=%d",
        config.total_levels,
        config.anchor.value,
        target,
        rewards[0],
        rewards[-1],
    )
    return RewardTable(config=config, rewards=tuple(rewards))


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------
def build_reward_table(
    config: CurveConfig,
    *,
    cache: RewardTableCache | None = None,
) -> RewardTable:
    """Return the reward table for *config*.

    Raises
    ------
    ConfigError
        If *config* is invalid.  Raised before any entry is computed.
    """
    config.validate()
    if cache is None:
        return _compute_table(config)
    return cache.get_or_build(config, _compute_table)


def reward_for_level_anchored_at_top(
    level: int,
    total_levels: int,
    top_reward: int,
    base_score: int = DEFAULT_BASE_SCORE,
    exponent: int = DEFAULT_EXPONENT,
    *,
    cache: RewardTableCache | None = None,
) -> int:
    """Reward at *level* on a curve whose top level pays *top_reward*."""
    table = build_reward_table(
        CurveConfig(total_levels, AnchorType.MAX, top_reward, base_score, exponent),
        cache=cache,
    )
    return table.reward_for_level(level)


def reward_for_level_anchored_at_base(
    level: int,
    total_levels: int,
    base_reward: int,
    base_score: int = DEFAULT_BASE_SCORE,
    exponent: int = DEFAULT_EXPONENT,
    *,
    cache: RewardTableCache | None = None,
) -> int:
    """Reward at *level* on a curve whose level 1 pays *base_reward*."""
    table = build_reward_table(
        CurveConfig(total_levels, AnchorType.MIN, base_reward, base_score, exponent),
        cache=cache,
    )
    return table.reward_for_level(level)
