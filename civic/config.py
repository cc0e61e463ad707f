"""
civic.config — YAML Configuration Loader
=========================================

Reads ``config.yaml`` for the curve defaults and runtime knobs used by the
command line and by services that wire up a shared table cache.  Every key
is optional; absent keys fall back to the defaults in
:mod:`civic.constants`.

Usage::

    from civic.config import load_config

    cfg = load_config()              # reads ./config.yaml by default
    print(cfg.base_score)            # 100
    print(cfg.default_anchor)        # AnchorType.MAX
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import yaml

from civic.constants import (
    DEFAULT_BASE_SCORE,
    DEFAULT_CACHE_MAX_ENTRIES,
    DEFAULT_EXPONENT,
)
from civic.engine.curve import AnchorType, ConfigError

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


# ---------------------------------------------------------------------------
# Typed settings object
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class CivicConfig:
    """Immutable configuration loaded from ``config.yaml``."""

    # Score curve
    base_score: int = DEFAULT_BASE_SCORE
    exponent: int = DEFAULT_EXPONENT

    # Ladder defaults for tools that don't pass their own
    default_anchor: AnchorType = AnchorType.MAX
    default_total_levels: int = 10

    # Runtime
    cache_max_entries: int = DEFAULT_CACHE_MAX_ENTRIES
    log_level: str = "INFO"


def _positive_int(raw: dict, key: str, default: int) -> int:
    value = raw.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ConfigError(f"{key} must be a positive integer, got {value!r}")
    return value


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------
def load_config(path: str | Path = "config.yaml") -> CivicConfig:
    """Read *path* and return a :class:`CivicConfig` instance.

    Parameters
    ----------
    path:
        Filesystem path to the YAML configuration file.
        Defaults to ``config.yaml`` in the current working directory.

    Raises
    ------
    FileNotFoundError
        If the YAML file doesn't exist.
    ConfigError
        If a value is present but invalid.
    """
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(
            f"Configuration file not found: {config_path.resolve()}\n"
            "Hint: copy config.yaml.example → config.yaml and edit it."
        )

    with open(config_path, encoding="utf-8") as fh:
        raw = yaml.safe_load(fh) or {}
    if not isinstance(raw, dict):
        raise ConfigError(f"{config_path} must contain a mapping at the top level")

    log_level = str(raw.get("log_level", "INFO")).upper()
    if log_level not in VALID_LOG_LEVELS:
        raise ConfigError(
            f"Invalid log_level: {log_level}. Must be one of {VALID_LOG_LEVELS}"
        )

    return CivicConfig(
        base_score=_positive_int(raw, "base_score", DEFAULT_BASE_SCORE),
        exponent=_positive_int(raw, "exponent", DEFAULT_EXPONENT),
        default_anchor=AnchorType.parse(raw.get("default_anchor", "max")),
        default_total_levels=_positive_int(raw, "default_total_levels", 10),
        cache_max_entries=_positive_int(
            raw, "cache_max_entries", DEFAULT_CACHE_MAX_ENTRIES
        ),
        log_level=log_level,
    )
