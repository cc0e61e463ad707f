"""
tests/conftest.py — Shared Test Fixtures
=========================================
"""

from __future__ import annotations

import pytest

from civic.engine.cache import RewardTableCache
from civic.engine.curve import AnchorType, CurveConfig


@pytest.fixture
def cache() -> RewardTableCache:
    """A fresh, caller-owned table cache (never the process default)."""
    return RewardTableCache(max_entries=16)


@pytest.fixture
def linear_config() -> CurveConfig:
    """Rewards 100, 200, 300, … — a linear curve anchored at level 1."""
    return CurveConfig(
        total_levels=10,
        anchor=AnchorType.MIN,
        per_user_reward=100,
        base_score=100,
        exponent=1,
    )


@pytest.fixture
def cubic_max_config() -> CurveConfig:
    """The default cubic curve with the top of a 10-level ladder paying 100000."""
    return CurveConfig(total_levels=10, anchor=AnchorType.MAX, per_user_reward=100_000)


# Reused by parametrized property tests across modules
SAMPLE_CONFIGS: list[CurveConfig] = [
    CurveConfig(1, AnchorType.MIN, 0),
    CurveConfig(1, AnchorType.MAX, 7),
    CurveConfig(10, AnchorType.MAX, 100_000),
    CurveConfig(10, AnchorType.MIN, 100_000),
    CurveConfig(10, AnchorType.MAX, 5),
    CurveConfig(25, AnchorType.MAX, 10**30),
    CurveConfig(50, AnchorType.MIN, 3, base_score=7, exponent=2),
    CurveConfig(200, AnchorType.MAX, 123_456_789, base_score=1, exponent=5),
]
