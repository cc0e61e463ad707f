"""
tests/test_curve.py — Score Curve & CurveConfig Tests
======================================================
"""

from __future__ import annotations

import pytest

from civic.engine.curve import (
    AnchorType,
    ConfigError,
    CurveConfig,
    level_for_score,
    level_table,
    score_for_level,
)


# ---------------------------------------------------------------------------
# score_for_level
# ---------------------------------------------------------------------------
class TestScoreForLevel:
    @pytest.mark.parametrize(
        "level, expected",
        [(1, 100), (2, 800), (3, 2700), (10, 100_000)],
    )
    def test_default_cubic_curve(self, level, expected):
        assert score_for_level(level) == expected

    @pytest.mark.parametrize("level", [0, -1, -50])
    def test_below_one_clamps_to_base(self, level):
        assert score_for_level(level) == 100
        assert score_for_level(level, base_score=7, exponent=4) == 7

    def test_custom_parameters(self):
        assert score_for_level(4, base_score=3, exponent=2) == 48

    def test_exact_for_huge_levels(self):
        level = 10**12
        assert score_for_level(level) == 100 * 10**36

    def test_monotonic(self):
        scores = [score_for_level(lvl, 7, 3) for lvl in range(1, 500)]
        assert scores == sorted(scores)
        assert len(set(scores)) == len(scores)


# ---------------------------------------------------------------------------
# level_for_score — exact inverse
# ---------------------------------------------------------------------------
class TestLevelForScore:
    @pytest.mark.parametrize(
        "score, expected",
        [
            (0, 1),
            (100, 1),
            (799, 1),
            (800, 2),
            (99_999, 9),
            (100_000, 10),
        ],
    )
    def test_default_curve(self, score, expected):
        assert level_for_score(score) == expected

    def test_round_trips_every_level(self):
        for level in range(1, 300):
            score = score_for_level(level, 13, 4)
            assert level_for_score(score, 13, 4) == level
            assert level_for_score(score - 1, 13, 4) == max(1, level - 1)

    def test_exact_beyond_float_precision(self):
        level = 10**20
        score = score_for_level(level)
        assert level_for_score(score) == level
        assert level_for_score(score - 1) == level - 1

    def test_linear_exponent(self):
        assert level_for_score(12_345, base_score=10, exponent=1) == 1234


class TestLevelTable:
    def test_rows(self):
        assert level_table(3) == [(1, 100), (2, 800), (3, 2700)]

    def test_empty_for_zero_levels(self):
        assert level_table(0) == []


# ---------------------------------------------------------------------------
# AnchorType / CurveConfig
# ---------------------------------------------------------------------------
class TestAnchorType:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("min", AnchorType.MIN),
            ("MAX", AnchorType.MAX),
            (" max ", AnchorType.MAX),
            (AnchorType.MIN, AnchorType.MIN),
        ],
    )
    def test_parse(self, raw, expected):
        assert AnchorType.parse(raw) is expected

    @pytest.mark.parametrize("raw", ["middle", "", None, 1])
    def test_parse_rejects_unknown(self, raw):
        with pytest.raises(ConfigError, match="Unknown anchor"):
            AnchorType.parse(raw)


class TestCurveConfig:
    def test_defaults(self):
        cfg = CurveConfig(10, AnchorType.MAX, 1)
        assert cfg.base_score == 100
        assert cfg.exponent == 3

    def test_anchor_level(self):
        assert CurveConfig(10, AnchorType.MIN, 1).anchor_level == 1
        assert CurveConfig(10, AnchorType.MAX, 1).anchor_level == 10

    def test_key_covers_all_fields(self):
        cfg = CurveConfig(10, AnchorType.MAX, 5, 7, 2)
        assert cfg.key == (10, "max", 5, 7, 2)

    def test_equal_configs_share_key(self):
        assert CurveConfig(3, AnchorType.MIN, 9).key == CurveConfig(3, AnchorType.MIN, 9).key

    def test_valid_config_passes(self):
        CurveConfig(1, AnchorType.MIN, 0).validate()

    @pytest.mark.parametrize(
        "kwargs, message",
        [
            ({"total_levels": 0}, "total_levels"),
            ({"total_levels": -3}, "total_levels"),
            ({"total_levels": 2.5}, "total_levels"),
            ({"per_user_reward": -1}, "per_user_reward"),
            ({"per_user_reward": 10.0}, "per_user_reward"),
            ({"per_user_reward": True}, "per_user_reward"),
            ({"base_score": 0}, "base_score"),
            ({"exponent": 0}, "exponent"),
            ({"anchor": "max"}, "anchor"),
        ],
    )
    def test_invalid_fields_raise(self, kwargs, message):
        fields = {"total_levels": 10, "anchor": AnchorType.MAX, "per_user_reward": 100}
        fields.update(kwargs)
        with pytest.raises(ConfigError, match=message):
            CurveConfig(**fields).validate()

    def test_config_error_is_value_error(self):
        assert issubclass(ConfigError, ValueError)
