"""
civic.constants — Shared Constants
===================================

Single source of truth for the score-curve defaults and the named level
ladder.  Import from here instead of duplicating in the engine, the
preview service, and the CLI.
"""

from __future__ import annotations

from typing import NamedTuple

# ---------------------------------------------------------------------------
# Score curve defaults
# ---------------------------------------------------------------------------
DEFAULT_BASE_SCORE: int = 100
DEFAULT_EXPONENT: int = 3

# Default capacity of the reward-table LRU cache
DEFAULT_CACHE_MAX_ENTRIES: int = 256

# Placeholder title for levels beyond the ladder
UNTITLED_LEVEL = "\u2014"  # —


# ---------------------------------------------------------------------------
# Level ladder (presentation only; rewards come from the reward table)
# ---------------------------------------------------------------------------
class LevelTitle(NamedTuple):
    level: int
    title: str
    description: str


LEVEL_LADDER: tuple[LevelTitle, ...] = (
    LevelTitle(1, "Explorer",
               "You've taken your first steps, setting out with curiosity "
               "to discover civic life."),
    LevelTitle(2, "Settler",
               "You're building roots, observing carefully, and laying down "
               "early foundations."),
    LevelTitle(3, "Participant",
               "You've moved from watching to acting, casting your voice "
               "into the collective."),
    LevelTitle(4, "Contributor",
               "You're adding your own questions and ideas, helping shape "
               "the civic conversation."),
    LevelTitle(5, "Advocate",
               "You're speaking out with passion, rallying others and "
               "amplifying community voices."),
    LevelTitle(6, "Guardian",
               "You stand firm for fairness, defending values and "
               "safeguarding the integrity of engagement."),
    LevelTitle(7, "Builder",
               "You've mastered the foundations and are now shaping bigger "
               "structures."),
    LevelTitle(8, "Strategist",
               "You're thinking several moves ahead, guiding civic energy "
               "with foresight and precision."),
    LevelTitle(9, "Visionary",
               "You're inspiring others with vision, illuminating the path "
               "toward greater possibilities."),
    LevelTitle(10, "Legend",
               "You've become a symbol of civic excellence, leaving a "
               "lasting legacy for others to follow."),
)

_LADDER_BY_LEVEL: dict[int, LevelTitle] = {t.level: t for t in LEVEL_LADDER}


def title_for_level(level: int) -> LevelTitle:
    """Return the ladder entry for *level*, or a placeholder past the top."""
    entry = _LADDER_BY_LEVEL.get(level)
    if entry is not None:
        return entry
    return LevelTitle(level, UNTITLED_LEVEL, "")
