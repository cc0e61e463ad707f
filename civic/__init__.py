"""
Civic — Reward-Curve Engine for Gamified Civic Engagement
==========================================================
Derives a per-level reward schedule from a single anchor reward and
allocates payouts against a shared, capped reward pool without ever
over-spending it.  All amounts are exact integers in currency base units.

Package layout::

    civic/
    ├── config.py          # YAML → typed Python config
    ├── constants.py       # Curve defaults + named level ladder
    ├── __main__.py        # python -m civic (table / preview / distribute)
    ├── engine/
    │   ├── curve.py       # Score curve, CurveConfig, AnchorType, ConfigError
    │   ├── table.py       # Reward table builder
    │   ├── cache.py       # Injectable LRU cache of reward tables
    │   ├── allocator.py   # Capped per-user payout
    │   └── distributor.py # Ordered batch distribution
    └── services/
        ├── preview_service.py  # Distribution preview rows (per-row cap)
        └── payout_service.py   # Ledger-backed payout runs, one per pool
"""

__version__ = "0.1.0"
