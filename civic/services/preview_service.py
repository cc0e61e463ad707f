"""
civic.services.preview_service — Distribution Preview Rows
===========================================================

Prepares the data behind the admin "Distribution Preview" table: the raw
reward per level, the value actually shown once a per-row amount cap is
applied, and how many rows the cap touched.  Rendering and currency
formatting belong to the display layer.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from civic.constants import DEFAULT_BASE_SCORE, DEFAULT_EXPONENT, title_for_level
from civic.engine.curve import AnchorType, CurveConfig
from civic.engine.table import build_reward_table

if TYPE_CHECKING:
    from civic.engine.cache import RewardTableCache
    from civic.engine.table import RewardTable

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PreviewRow:
    level: int
    raw: int
    display: int
    capped: bool = False
    diff: int = 0


@dataclass(frozen=True)
class DistributionPreview:
    """Preview of one reward configuration.

    ``rows`` is empty when there is nothing to preview (non-positive
    per-user reward).
    """

    anchor: AnchorType
    per_user_reward: int
    total_levels: int
    cap: int = 0
    rows: list[PreviewRow] = field(default_factory=list)

    @property
    def capped_count(self) -> int:
        return sum(1 for r in self.rows if r.capped)

    @property
    def is_empty(self) -> bool:
        return not self.rows


@dataclass(frozen=True, slots=True)
class LadderRow:
    level: int
    title: str
    description: str
    reward: int


def build_preview(
    per_user_reward: int,
    anchor: AnchorType | str,
    total_levels: int,
    reward_amount_cap: int = 0,
    base_score: int = DEFAULT_BASE_SCORE,
    exponent: int = DEFAULT_EXPONENT,
    *,
    cache: RewardTableCache | None = None,
) -> DistributionPreview:
    """Build preview rows for a reward form.

    ``total_levels`` below 1 is treated as 1 and a negative cap as no cap,
    mirroring how the form fields are read.  The reward itself is not
    coerced: a negative value still raises :class:`ConfigError`
    from the table builder, while 0 yields an empty preview.

    *base_score* and *exponent* select the score curve; pass the values
    payouts run with.
    """
    anchor = AnchorType.parse(anchor)
    total_levels = max(1, int(total_levels))
    cap = max(0, int(reward_amount_cap))

    if per_user_reward == 0:
        return DistributionPreview(anchor, per_user_reward, total_levels, cap)

    table = build_reward_table(
        CurveConfig(total_levels, anchor, per_user_reward, base_score, exponent),
        cache=cache,
    )

    rows: list[PreviewRow] = []
    for level, raw in table.rows():
        if cap > 0 and raw > cap:
            rows.append(PreviewRow(level, raw, cap, capped=True, diff=raw - cap))
        else:
            rows.append(PreviewRow(level, raw, raw))

    preview = DistributionPreview(anchor, per_user_reward, total_levels, cap, rows)
    if preview.capped_count:
        logger.debug(
            "Preview %s/%d/%d: %d of %d rows capped at %d",
            anchor.value, per_user_reward, total_levels,
            preview.capped_count, len(rows), cap,
        )
    return preview


def ladder_rows(table: RewardTable) -> list[LadderRow]:
    """Pair every level of *table* with its ladder title."""
    out: list[LadderRow] = []
    for level, reward in table.rows():
        entry = title_for_level(level)
        out.append(LadderRow(level, entry.title, entry.description, reward))
    return out
