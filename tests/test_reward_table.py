"""
tests/test_reward_table.py — Reward Table Builder Tests
========================================================

Pure calculation tests (no ledger, no cache unless injected).
"""

from __future__ import annotations

import pytest

from civic.engine.curve import AnchorType, ConfigError, CurveConfig
from civic.engine.table import (
    RewardTable,
    build_reward_table,
    reward_for_level_anchored_at_base,
    reward_for_level_anchored_at_top,
)

from conftest import SAMPLE_CONFIGS


# ---------------------------------------------------------------------------
# Concrete schedules
# ---------------------------------------------------------------------------
class TestConcreteTables:
    def test_max_anchor_ten_levels(self, cubic_max_config):
        table = build_reward_table(cubic_max_config)
        assert table.rewards == (
            100, 800, 2700, 6400, 12500, 21600, 34300, 51200, 72900, 100_000,
        )
        assert table.rewards[9] == 100_000
        assert table.rewards[0] == 100_000 * 1 // 1000

    def test_min_anchor_ten_levels(self):
        table = build_reward_table(CurveConfig(10, AnchorType.MIN, 100))
        assert table.rewards[0] == 100
        assert table.rewards[9] == 100_000

    def test_linear_curve(self, linear_config):
        table = build_reward_table(linear_config)
        assert table.rewards == tuple(100 * lvl for lvl in range(1, 11))

    @pytest.mark.parametrize("anchor", [AnchorType.MIN, AnchorType.MAX])
    def test_single_level_ladder(self, anchor):
        table = build_reward_table(CurveConfig(1, anchor, 4242))
        assert table.rewards == (4242,)

    def test_small_target_clamps_to_one(self):
        # 5 * i^3 // 1000
        table = build_reward_table(CurveConfig(10, AnchorType.MAX, 5))
        assert table.rewards == (1, 1, 1, 1, 1, 1, 1, 2, 3, 5)

    def test_zero_target_gives_zero_everywhere(self):
        table = build_reward_table(CurveConfig(10, AnchorType.MAX, 0))
        assert table.rewards == (0,) * 10

    def test_exact_beyond_float_precision(self):
        target = 2**53 + 1
        table = build_reward_table(CurveConfig(3, AnchorType.MIN, target))
        assert table.rewards == (target, target * 8, target * 27)

    def test_huge_target_is_exact(self):
        table = build_reward_table(CurveConfig(10, AnchorType.MAX, 10**30))
        assert table.rewards[0] == 10**27
        assert table.rewards[4] == 125 * 10**27
        assert table.rewards[9] == 10**30


# ---------------------------------------------------------------------------
# Invariants over a grid of configs
# ---------------------------------------------------------------------------
class TestTableInvariants:
    @pytest.mark.parametrize("config", SAMPLE_CONFIGS, ids=lambda c: str(c.key))
    def test_anchor_pays_exactly_target(self, config):
        table = build_reward_table(config)
        assert table.rewards[config.anchor_level - 1] == config.per_user_reward

    @pytest.mark.parametrize("config", SAMPLE_CONFIGS, ids=lambda c: str(c.key))
    def test_non_decreasing(self, config):
        rewards = build_reward_table(config).rewards
        assert all(a <= b for a, b in zip(rewards, rewards[1:]))

    @pytest.mark.parametrize("config", SAMPLE_CONFIGS, ids=lambda c: str(c.key))
    def test_length_and_floor(self, config):
        table = build_reward_table(config)
        assert len(table.rewards) == config.total_levels
        floor = 1 if config.per_user_reward > 0 else 0
        assert min(table.rewards) >= floor

    @pytest.mark.parametrize("config", SAMPLE_CONFIGS, ids=lambda c: str(c.key))
    def test_deterministic(self, config):
        assert build_reward_table(config) == build_reward_table(config)


# ---------------------------------------------------------------------------
# RewardTable helpers
# ---------------------------------------------------------------------------
class TestRewardTableHelpers:
    @pytest.fixture
    def table(self, cubic_max_config) -> RewardTable:
        return build_reward_table(cubic_max_config)

    def test_min_max(self, table):
        assert table.min_reward == 100
        assert table.max_reward == 100_000
        assert table.total_levels == 10

    @pytest.mark.parametrize(
        "level, expected",
        [(-5, 100), (0, 100), (1, 100), (5, 12_500), (10, 100_000), (99, 100_000)],
    )
    def test_reward_for_level_clamps(self, table, level, expected):
        assert table.reward_for_level(level) == expected

    def test_rows(self, table):
        rows = table.rows()
        assert rows[0] == (1, 100)
        assert rows[-1] == (10, 100_000)
        assert len(rows) == 10

    def test_table_is_frozen(self, table):
        with pytest.raises(AttributeError):
            table.rewards = ()


# ---------------------------------------------------------------------------
# Error handling
# ---------------------------------------------------------------------------
class TestBuildErrors:
    def test_zero_levels(self):
        with pytest.raises(ConfigError, match="total_levels"):
            build_reward_table(CurveConfig(0, AnchorType.MAX, 100))

    def test_negative_reward_not_coerced(self):
        with pytest.raises(ConfigError, match="per_user_reward"):
            build_reward_table(CurveConfig(10, AnchorType.MAX, -1))

    def test_invalid_config_never_reaches_cache(self, cache):
        with pytest.raises(ConfigError):
            build_reward_table(CurveConfig(10, AnchorType.MAX, -1), cache=cache)
        assert len(cache) == 0
        assert cache.misses == 0


# ---------------------------------------------------------------------------
# Anchored convenience lookups
# ---------------------------------------------------------------------------
class TestAnchoredLookups:
    def test_anchored_at_top(self):
        assert reward_for_level_anchored_at_top(10, 10, 100_000) == 100_000
        assert reward_for_level_anchored_at_top(1, 10, 100_000) == 100
        assert reward_for_level_anchored_at_top(42, 10, 100_000) == 100_000

    def test_anchored_at_base(self):
        assert reward_for_level_anchored_at_base(1, 10, 100) == 100
        assert reward_for_level_anchored_at_base(2, 10, 100) == 800
        assert reward_for_level_anchored_at_base(0, 10, 100) == 100

    def test_custom_curve(self):
        assert reward_for_level_anchored_at_base(3, 5, 10, base_score=1, exponent=1) == 30

    def test_uses_injected_cache(self, cache):
        reward_for_level_anchored_at_top(3, 10, 100_000, cache=cache)
        reward_for_level_anchored_at_top(7, 10, 100_000, cache=cache)
        assert cache.misses == 1
        assert cache.hits == 1
