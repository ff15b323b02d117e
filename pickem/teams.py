"""Team alias table and name resolver used to match pick sheets to the feed."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Mapping

logger = logging.getLogger(__name__)

# Canonical label -> (mascot, feed displayName, extra aliases)
_NFL_TEAMS: dict[str, tuple[str, str, tuple[str, ...]]] = {
    "Arizona": ("Cardinals", "Arizona Cardinals", ()),
    "Atlanta": ("Falcons", "Atlanta Falcons", ()),
    "Baltimore": ("Ravens", "Baltimore Ravens", ()),
    "Buffalo": ("Bills", "Buffalo Bills", ()),
    "Carolina": ("Panthers", "Carolina Panthers", ()),
    "Chicago": ("Bears", "Chicago Bears", ()),
    "Cincinnati": ("Bengals", "Cincinnati Bengals", ()),
    "Cleveland": ("Browns", "Cleveland Browns", ()),
    "Dallas": ("Cowboys", "Dallas Cowboys", ()),
    "Denver": ("Broncos", "Denver Broncos", ()),
    "Detroit": ("Lions", "Detroit Lions", ()),
    "Green Bay": ("Packers", "Green Bay Packers", ()),
    "Houston": ("Texans", "Houston Texans", ()),
    "Indianapolis": ("Colts", "Indianapolis Colts", ()),
    "Jacksonville": ("Jaguars", "Jacksonville Jaguars", ()),
    "Kansas City": ("Chiefs", "Kansas City Chiefs", ()),
    "Las Vegas": ("Raiders", "Las Vegas Raiders", ()),
    "LA Chargers": ("Chargers", "Los Angeles Chargers", ("L.A. Chargers",)),
    "LA Rams": ("Rams", "Los Angeles Rams", ("L.A. Rams",)),
    "Miami": ("Dolphins", "Miami Dolphins", ()),
    "Minnesota": ("Vikings", "Minnesota Vikings", ()),
    "New England": ("Patriots", "New England Patriots", ()),
    "New Orleans": ("Saints", "New Orleans Saints", ()),
    "NY Giants": ("Giants", "New York Giants", ("N.Y. Giants",)),
    "NY Jets": ("Jets", "New York Jets", ("N.Y. Jets",)),
    "Philadelphia": ("Eagles", "Philadelphia Eagles", ()),
    "Pittsburgh": ("Steelers", "Pittsburgh Steelers", ()),
    "San Francisco": ("49ers", "San Francisco 49ers", ()),
    "Seattle": ("Seahawks", "Seattle Seahawks", ()),
    "Tampa Bay": ("Buccaneers", "Tampa Bay Buccaneers", ()),
    "Tennessee": ("Titans", "Tennessee Titans", ()),
    "Washington": ("Commanders", "Washington Commanders", ()),
}


def _build_nfl_aliases() -> dict[str, str]:
    aliases: dict[str, str] = {}
    for canonical, (mascot, display_name, extra) in _NFL_TEAMS.items():
        for alias in (canonical, mascot, display_name, *extra):
            aliases[alias] = canonical
    return aliases


DEFAULT_NFL_ALIASES: dict[str, str] = _build_nfl_aliases()


class NameResolver:
    """Collapses team aliases to one canonical label.

    Every canonical label maps to itself, so resolving twice is the same as
    resolving once. A table where a canonical label is also an alias of a
    different label is rejected.
    """

    def __init__(self, aliases: Mapping[str, str]) -> None:
        table: dict[str, str] = {}
        for alias, canonical in aliases.items():
            table[alias.strip()] = canonical.strip()
        for canonical in set(table.values()):
            mapped = table.setdefault(canonical, canonical)
            if mapped != canonical:
                raise ValueError(
                    f"Alias table is not idempotent: {canonical!r} is canonical "
                    f"but also maps to {mapped!r}"
                )
        self._table = table

    def __len__(self) -> int:
        return len(self._table)

    def canonical(self, raw_name: str) -> str:
        """Return the canonical label, or the input unchanged when unmapped."""
        mapped = self._table.get(raw_name.strip())
        if mapped is None:
            logger.debug("Unmapped team name %r", raw_name)
            return raw_name
        return mapped

    def same_team(self, left: str, right: str) -> bool:
        return self.canonical(left) == self.canonical(right)


def load_alias_file(path: str | Path) -> dict[str, str]:
    """Read a JSON object of ``alias -> canonical``.

    Returns an empty mapping when the file does not exist.
    """
    p = Path(path)
    if not p.exists():
        logger.warning("Alias file %s not found", p)
        return {}

    with p.open("r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Alias file {p} must contain a JSON object")

    aliases: dict[str, str] = {}
    for alias, canonical in data.items():
        if not isinstance(canonical, str) or not alias.strip() or not canonical.strip():
            logger.warning("Skipping invalid alias entry %r -> %r in %s", alias, canonical, p)
            continue
        aliases[alias] = canonical
    logger.info("Loaded %s aliases from %s", len(aliases), p)
    return aliases


def build_resolver(alias_file: str | Path | None = None) -> NameResolver:
    if alias_file:
        aliases = load_alias_file(alias_file)
        if aliases:
            return NameResolver(aliases)
    return NameResolver(DEFAULT_NFL_ALIASES)
