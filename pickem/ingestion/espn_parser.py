"""Parser for ESPN scoreboard payloads."""

from __future__ import annotations

import logging
from typing import Any

from pickem.schemas import FeedCompetitor, FeedEvent

logger = logging.getLogger(__name__)


def _competitor(competitor: dict[str, Any]) -> FeedCompetitor | None:
    team = competitor.get("team")
    if not isinstance(team, dict):
        return None
    name = team.get("displayName") or team.get("name")
    if not isinstance(name, str) or not name:
        return None
    score = competitor.get("score")
    return FeedCompetitor(name=name, score="" if score is None else str(score))


def _status_name(competition: dict[str, Any], event: dict[str, Any]) -> str:
    for source in (competition, event):
        status = source.get("status")
        if isinstance(status, dict):
            status_type = status.get("type")
            if isinstance(status_type, dict) and isinstance(status_type.get("name"), str):
                return status_type["name"]
    return ""


def parse_scoreboard(scoreboard_json: dict) -> list[FeedEvent]:
    """Parse ESPN scoreboard JSON into FeedEvent list.

    Only the first competition of each event is read. Events without both a
    home and an away competitor are skipped.
    """

    events = scoreboard_json.get("events")
    if not isinstance(events, list):
        return []

    parsed: list[FeedEvent] = []
    for event in events:
        if not isinstance(event, dict):
            continue

        competitions = event.get("competitions")
        if not isinstance(competitions, list) or not competitions:
            continue
        competition = competitions[0]
        if not isinstance(competition, dict):
            continue

        competitors = competition.get("competitors")
        if not isinstance(competitors, list):
            competitors = []

        home = None
        away = None
        for competitor in competitors:
            if not isinstance(competitor, dict):
                continue
            home_away = competitor.get("homeAway")
            if home_away == "home":
                home = _competitor(competitor)
            elif home_away == "away":
                away = _competitor(competitor)

        if home is None or away is None:
            logger.debug("Skipping event id=%s without home/away competitors", event.get("id"))
            continue

        event_id = event.get("id")
        parsed.append(
            FeedEvent(
                event_id=str(event_id) if event_id is not None else None,
                status_name=_status_name(competition, event),
                home=home,
                away=away,
            )
        )

    return parsed
