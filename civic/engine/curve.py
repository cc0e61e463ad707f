"""
civic.engine.curve — Score Curve & Curve Configuration
========================================================

The power-law score curve every reward table is scaled from::

    score(level) = base_score * level ** exponent

All arithmetic is exact ``int`` math.  No float ever enters a reward path,
so reward magnitudes are unbounded.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

from civic.constants import DEFAULT_BASE_SCORE, DEFAULT_EXPONENT

__all__ = [
    "AnchorType",
    "ConfigError",
    "CurveConfig",
    "level_for_score",
    "level_table",
    "score_for_level",
]


class ConfigError(ValueError):
    """Raised for an invalid :class:`CurveConfig`.

    Raised before any table entry is computed; bad values are never
    clamped into range.
    """


class AnchorType(enum.StrEnum):
    """Which level carries ``per_user_reward`` exactly."""
    MIN = "min"  # level 1 is the reference
    MAX = "max"  # level total_levels is the reference

    @classmethod
    def parse(cls, value: AnchorType | str) -> AnchorType:
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise ConfigError(f"Unknown anchor type: {value!r} (expected 'min' or 'max')")


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


# ---------------------------------------------------------------------------
# CurveConfig — the full key of a reward table
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class CurveConfig:
    """Immutable reward-curve configuration.

    Two equal configs always produce identical reward tables; :attr:`key`
    is the canonical cache key built from all five fields.
    """

    total_levels: int
    anchor: AnchorType
    per_user_reward: int
    base_score: int = DEFAULT_BASE_SCORE
    exponent: int = DEFAULT_EXPONENT

    def validate(self) -> None:
        """Raise :class:`ConfigError` if any field is out of range."""
        if not _is_int(self.total_levels) or self.total_levels < 1:
            raise ConfigError(
                f"total_levels must be a positive integer, got {self.total_levels!r}"
            )
        if not isinstance(self.anchor, AnchorType):
            raise ConfigError(f"anchor must be an AnchorType, got {self.anchor!r}")
        if not _is_int(self.per_user_reward) or self.per_user_reward < 0:
            raise ConfigError(
                "per_user_reward must be a non-negative integer, "
                f"got {self.per_user_reward!r}"
            )
        if not _is_int(self.base_score) or self.base_score < 1:
            raise ConfigError(
                f"base_score must be a positive integer, got {self.base_score!r}"
            )
        if not _is_int(self.exponent) or self.exponent < 1:
            raise ConfigError(
                f"exponent must be a positive integer, got {self.exponent!r}"
            )

    @property
    def anchor_level(self) -> int:
        return self.total_levels if self.anchor is AnchorType.MAX else 1

    @property
    def key(self) -> tuple[int, str, int, int, int]:
        return (
            self.total_levels,
            self.anchor.value,
            self.per_user_reward,
            self.base_score,
            self.exponent,
        )


# ---------------------------------------------------------------------------
# Curve
# ---------------------------------------------------------------------------
def score_for_level(
    level: int,
    base_score: int = DEFAULT_BASE_SCORE,
    exponent: int = DEFAULT_EXPONENT,
) -> int:
    """Score at *level*.  Levels below 1 clamp to ``base_score``."""
    if level < 1:
        return base_score
    return base_score * level ** exponent


def _iroot(value: int, n: int) -> int:
    """Largest ``r`` such that ``r ** n <= value`` (value >= 0, n >= 1)."""
    if value < 2 or n == 1:
        return value
    lo, hi = 1, 1 << (value.bit_length() // n + 1)
    while lo < hi:
        mid = (lo + hi + 1) // 2
        if mid ** n <= value:
            lo = mid
        else:
            hi = mid - 1
    return lo


def level_for_score(
    score: int,
    base_score: int = DEFAULT_BASE_SCORE,
    exponent: int = DEFAULT_EXPONENT,
) -> int:
    """Highest level whose score does not exceed *score* (minimum 1)."""
    if score <= base_score:
        return 1
    # level**e <= score/base  <=>  level**e <= score // base  (level is an int)
    return max(1, _iroot(score // base_score, exponent))


def level_table(
    total_levels: int,
    base_score: int = DEFAULT_BASE_SCORE,
    exponent: int = DEFAULT_EXPONENT,
) -> list[tuple[int, int]]:
    """``(level, score)`` rows for levels ``1..total_levels``."""
    return [
        (level, score_for_level(level, base_score, exponent))
        for level in range(1, total_levels + 1)
    ]
