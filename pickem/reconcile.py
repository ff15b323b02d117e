"""Apply scoreboard events to parsed contests."""

from __future__ import annotations

import logging
import re
from typing import Iterable, Literal, Sequence

from pickem.schemas import Contest, FeedEvent, Final, InProgress, Unresolved
from pickem.teams import NameResolver

logger = logging.getLogger(__name__)

STATUS_SCHEDULED = "STATUS_SCHEDULED"
STATUS_IN_PROGRESS = "STATUS_IN_PROGRESS"
STATUS_FINAL = "STATUS_FINAL"

_LEADING_INT_RE = re.compile(r"\s*([+-]?\d+)")


def parse_score(value: str | None) -> int:
    """Leading integer of a feed score string; anything else counts as 0."""
    if value is None:
        return 0
    m = _LEADING_INT_RE.match(str(value))
    if m is None:
        return 0
    return int(m.group(1))


def find_event(
    contest: Contest,
    events: Iterable[FeedEvent],
    resolver: NameResolver,
) -> FeedEvent | None:
    home = resolver.canonical(contest.home_name)
    away = resolver.canonical(contest.away_name)
    for event in events:
        if resolver.canonical(event.home.name) == home and resolver.canonical(event.away.name) == away:
            return event
    return None


def apply_event(
    contest: Contest,
    event: FeedEvent,
    tie_winner: Literal["home", "away"] = "home",
) -> Contest:
    home_score = parse_score(event.home.score)
    away_score = parse_score(event.away.score)
    status = event.status_name

    if status == STATUS_SCHEDULED:
        return contest.model_copy(update={"result": Unresolved()})

    if status == STATUS_IN_PROGRESS:
        leader = None
        if home_score > away_score:
            leader = contest.home_name
        elif away_score > home_score:
            leader = contest.away_name
        return contest.model_copy(
            update={
                "result": InProgress(
                    away_score=away_score,
                    home_score=home_score,
                    leader=leader,
                )
            }
        )

    if status == STATUS_FINAL:
        if home_score > away_score:
            winner = contest.home_name
        elif away_score > home_score:
            winner = contest.away_name
        else:
            winner = contest.home_name if tie_winner == "home" else contest.away_name
            logger.warning(
                "Tied final for contest id=%s (%s-%s); awarding %s side",
                contest.id,
                away_score,
                home_score,
                tie_winner,
            )
        return contest.model_copy(
            update={
                "result": Final(
                    away_score=away_score,
                    home_score=home_score,
                    winner=winner,
                )
            }
        )

    logger.debug("Ignoring feed status %r for contest id=%s", status, contest.id)
    return contest


def reconcile(
    contests: Sequence[Contest],
    events: Sequence[FeedEvent],
    resolver: NameResolver,
    tie_winner: Literal["home", "away"] = "home",
) -> list[Contest]:
    """Return a new contest list with results updated from matching events.

    A contest without a matching event is returned unchanged.
    """
    updated: list[Contest] = []
    matched = 0
    for contest in contests:
        event = find_event(contest, events, resolver)
        if event is None:
            logger.debug(
                "No feed event for contest id=%s %s at %s",
                contest.id,
                contest.away_name,
                contest.home_name,
            )
            updated.append(contest)
            continue
        matched += 1
        updated.append(apply_event(contest, event, tie_winner))

    logger.info("Reconciled contests=%s matched=%s events=%s", len(contests), matched, len(events))
    return updated
