from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Literal

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Settings:
    espn_base_url: str
    season: int
    season_type: int
    default_week: int
    feed_timeout_seconds: float
    alias_file: str | None
    tie_winner: Literal["home", "away"]
    database_url: str


def _int_env(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring non-integer %s=%r, using %s", name, raw, default)
        return default


def _float_env(name: str, default: float) -> float:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("Ignoring non-numeric %s=%r, using %s", name, raw, default)
        return default


def _tie_winner_env() -> Literal["home", "away"]:
    raw = (os.getenv("PICKEM_TIE_WINNER") or "home").strip().lower()
    if raw == "away":
        return "away"
    if raw != "home":
        logger.warning("Unsupported PICKEM_TIE_WINNER=%r, using home", raw)
    return "home"


def load_settings() -> Settings:
    return Settings(
        espn_base_url=os.getenv("ESPN_BASE_URL", "https://site.api.espn.com").rstrip("/"),
        season=_int_env("PICKEM_SEASON", 2025),
        season_type=_int_env("PICKEM_SEASON_TYPE", 2),
        default_week=_int_env("PICKEM_DEFAULT_WEEK", 1),
        feed_timeout_seconds=_float_env("PICKEM_FEED_TIMEOUT_SECONDS", 12.0),
        alias_file=(os.getenv("PICKEM_ALIAS_FILE") or "").strip() or None,
        tie_winner=_tie_winner_env(),
        database_url=os.getenv("DATABASE_URL", "sqlite:///./pickem.db"),
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return load_settings()
