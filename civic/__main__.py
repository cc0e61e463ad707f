"""
civic.__main__ — Entry point for ``python -m civic``
=====================================================

Wiring:
1. Load .env (``CIVIC_CONFIG``, ``CIVIC_LOG_LEVEL``).
2. Load config.yaml if present, otherwise use defaults.
3. Configure logging.
4. Build the shared RewardTableCache.
5. Run the requested sub-command.

Run with::

    python -m civic table --levels 10 --anchor max --reward 100000
    python -m civic preview --reward 100000 --cap 50000
    python -m civic distribute --max-cap 150 --reward 100 --anchor min 2 1 5
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from collections.abc import Sequence

from dotenv import load_dotenv

from civic.config import CivicConfig, load_config
from civic.engine.cache import RewardTableCache
from civic.engine.curve import AnchorType, ConfigError, CurveConfig, score_for_level
from civic.engine.distributor import distribute
from civic.engine.table import build_reward_table
from civic.services.preview_service import build_preview, ladder_rows

logger = logging.getLogger("civic")


def _load_settings() -> CivicConfig:
    path = os.getenv("CIVIC_CONFIG", "config.yaml")
    try:
        return load_config(path)
    except FileNotFoundError:
        if "CIVIC_CONFIG" in os.environ:
            raise
        return CivicConfig()


def _build_parser(cfg: CivicConfig) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="civic", description="Civic reward-curve engine"
    )
    parser.add_argument(
        "--log-level",
        default=os.getenv("CIVIC_LOG_LEVEL", cfg.log_level),
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        type=str.upper,
        help="Log verbosity",
    )

    curve = argparse.ArgumentParser(add_help=False)
    curve.add_argument("--levels", type=int, default=cfg.default_total_levels,
                       help="Total levels in the ladder")
    curve.add_argument("--anchor", choices=["min", "max"],
                       default=cfg.default_anchor.value,
                       help="'min' anchors level 1, 'max' anchors the top level")
    curve.add_argument("--reward", type=int, required=True,
                       help="Per-user reward at the anchor level, in base units")

    sub = parser.add_subparsers(dest="command", required=True)

    table = sub.add_parser("table", parents=[curve], help="Print the reward table")
    table.add_argument("--titles", action="store_true",
                       help="Include ladder titles")

    preview = sub.add_parser("preview", parents=[curve],
                             help="Print the distribution preview")
    preview.add_argument("--cap", type=int, default=0,
                         help="Per-row amount cap (0 = no cap)")

    dist = sub.add_parser("distribute", parents=[curve],
                          help="Allocate payouts for users in order")
    dist.add_argument("--max-cap", type=int, required=True, help="Pool ceiling")
    dist.add_argument("--start", type=int, default=0,
                      help="Amount already distributed from the pool")
    dist.add_argument("user_levels", nargs="+", type=int, metavar="LEVEL",
                      help="User levels in payout order")
    return parser


def _curve_config(args: argparse.Namespace, cfg: CivicConfig) -> CurveConfig:
    return CurveConfig(
        total_levels=args.levels,
        anchor=AnchorType.parse(args.anchor),
        per_user_reward=args.reward,
        base_score=cfg.base_score,
        exponent=cfg.exponent,
    )


def _cmd_table(args: argparse.Namespace, cfg: CivicConfig, cache: RewardTableCache) -> None:
    table = build_reward_table(_curve_config(args, cfg), cache=cache)
    if args.titles:
        for row in ladder_rows(table):
            print(f"{row.level:>5}  {row.title:<12}  {row.reward}")
        return
    print(f"{'level':>5}  {'score':>12}  reward")
    for level, reward in table.rows():
        score = score_for_level(level, cfg.base_score, cfg.exponent)
        print(f"{level:>5}  {score:>12}  {reward}")


def _cmd_preview(args: argparse.Namespace, cfg: CivicConfig, cache: RewardTableCache) -> None:
    preview = build_preview(
        args.reward, args.anchor, args.levels, args.cap,
        cfg.base_score, cfg.exponent,
        cache=cache,
    )
    if preview.is_empty:
        print("Fill in a positive reward per user to preview distribution.")
        return
    header = f"type: {preview.anchor.value} · per-user: {preview.per_user_reward} · levels: {preview.total_levels}"
    if preview.cap > 0:
        header += f" · cap: {preview.cap} (capped {preview.capped_count})"
    print(header)
    for row in preview.rows:
        marker = f"  −{row.diff}" if row.capped else ""
        print(f"{row.level:>5}  {row.display}{marker}")


def _cmd_distribute(args: argparse.Namespace, cfg: CivicConfig, cache: RewardTableCache) -> None:
    payouts = distribute(
        args.user_levels, args.max_cap, args.start, _curve_config(args, cfg), cache=cache
    )
    for idx, (level, payout) in enumerate(zip(args.user_levels, payouts), start=1):
        print(f"user {idx:>4}  level {level:>4}  payout {payout}")
    total = max(0, args.start) + sum(payouts)
    print(f"distributed {total}/{args.max_cap}")


_COMMANDS = {
    "table": _cmd_table,
    "preview": _cmd_preview,
    "distribute": _cmd_distribute,
}


def main(argv: Sequence[str] | None = None) -> int:
    """Parse *argv* and run one sub-command.  Returns the exit code."""

    # 1. Environment variables.
    load_dotenv()

    # 2. Configuration.
    try:
        cfg = _load_settings()
    except (FileNotFoundError, ConfigError) as exc:
        print(f"civic: {exc}", file=sys.stderr)
        return 2

    args = _build_parser(cfg).parse_args(argv)

    # 3. Logging.
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s │ %(levelname)-8s │ %(name)s │ %(message)s",
        datefmt="%H:%M:%S",
    )
    logger.debug("Config: %s", cfg)

    # 4. Shared cache for this process.
    cache = RewardTableCache(max_entries=cfg.cache_max_entries)

    # 5. Run.
    try:
        _COMMANDS[args.command](args, cfg, cache)
    except ConfigError as exc:
        logger.error("Invalid curve configuration: %s", exc)
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
