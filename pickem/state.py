"""Application state and the transitions the hosting app applies to it.

Every transition takes the current ``AppState`` and returns a new one; the
caller replaces its reference wholesale. Nothing here holds shared state
except ``ScoreRefresher``'s in-flight flag.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Callable, Optional

from pydantic import BaseModel, Field

from pickem.errors import (
    FeedFetchError,
    InvalidPickError,
    NoScheduleError,
    PickLockedError,
    RefreshInProgressError,
    ScheduleFormatError,
    UnknownContestError,
    UnknownParticipantError,
)
from pickem.ingestion.espn_client import fetch_scoreboard
from pickem.ingestion.espn_parser import parse_scoreboard
from pickem.reconcile import reconcile
from pickem.schedule.parser import parse_schedule
from pickem.schemas import (
    Contest,
    FeedEvent,
    Final,
    Participant,
    RankedParticipant,
    Unresolved,
    WeekDocument,
)
from pickem.settings import Settings
from pickem.standings import compute_standings
from pickem.teams import NameResolver

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AppState(BaseModel):
    week_number: int
    season: int
    contests: list[Contest] = Field(default_factory=list)
    participants: list[Participant] = Field(default_factory=list)
    last_score_update: Optional[datetime] = None

    def contest(self, contest_id: int) -> Contest:
        for contest in self.contests:
            if contest.id == contest_id:
                return contest
        raise UnknownContestError(f"Contest {contest_id} not found")

    def participant(self, participant_id: int) -> Participant:
        for participant in self.participants:
            if participant.id == participant_id:
                return participant
        raise UnknownParticipantError(f"Participant {participant_id} not found")

    def contests_by_day(self) -> dict[str, list[Contest]]:
        grouped: dict[str, list[Contest]] = {}
        for contest in self.contests:
            grouped.setdefault(contest.day, []).append(contest)
        return grouped

    def standings(self) -> list[RankedParticipant]:
        return compute_standings(self.participants, self.contests)

    # --- transitions ---

    def load_schedule(self, text: str) -> "AppState":
        result = parse_schedule(text)
        if result.no_matches:
            raise ScheduleFormatError(
                "Could not parse games from file. Please check the format."
            )
        week_number = result.week_number if result.week_number is not None else self.week_number
        logger.info("Loaded %s contests for week %s", len(result.contests), week_number)
        # Contest ids restart at 1 on every sheet, so last week's picks and
        # tiebreakers would point at different games.
        participants = [
            p.model_copy(update={"picks": {}, "tiebreaker": 0}) for p in self.participants
        ]
        return self.model_copy(
            update={
                "week_number": week_number,
                "contests": result.contests,
                "participants": participants,
                "last_score_update": None,
            }
        )

    def with_contests(self, contests: list[Contest]) -> "AppState":
        return self.model_copy(update={"contests": contests, "last_score_update": _utcnow()})

    def add_participant(self, display_name: Optional[str] = None) -> tuple["AppState", Participant]:
        next_id = max((p.id for p in self.participants), default=0) + 1
        name = (display_name or "").strip() or f"Player {next_id}"
        participant = Participant(id=next_id, display_name=name)
        logger.info("Added participant id=%s name=%s", participant.id, participant.display_name)
        return self.model_copy(update={"participants": [*self.participants, participant]}), participant

    def _replace_participant(self, participant_id: int, **changes: Any) -> "AppState":
        current = self.participant(participant_id)
        updated = current.model_copy(update=changes)
        participants = [updated if p.id == participant_id else p for p in self.participants]
        return self.model_copy(update={"participants": participants})

    def rename_participant(self, participant_id: int, display_name: str) -> "AppState":
        return self._replace_participant(participant_id, display_name=display_name)

    def set_tiebreaker(self, participant_id: int, value: int) -> "AppState":
        return self._replace_participant(participant_id, tiebreaker=value)

    def set_pick(self, participant_id: int, contest_id: int, team: str) -> "AppState":
        contest = self.contest(contest_id)
        if team not in (contest.away_name, contest.home_name):
            raise InvalidPickError(
                f"{team!r} is not playing in contest {contest_id} "
                f"({contest.away_name} at {contest.home_name})"
            )
        if isinstance(contest.result, Final):
            raise PickLockedError(
                f"Contest {contest_id} is final ({contest.result.winner} won); picks are locked"
            )
        picks = {**self.participant(participant_id).picks, contest_id: team}
        return self._replace_participant(participant_id, picks=picks)

    def set_contest_winner(self, contest_id: int, winner: Optional[str]) -> "AppState":
        """Manually record or clear a contest's winner."""
        contest = self.contest(contest_id)
        if winner is None:
            result = Unresolved()
        elif winner in (contest.away_name, contest.home_name):
            current = contest.result
            result = Final(
                away_score=current.away_score,
                home_score=current.home_score,
                winner=winner,
            )
        else:
            raise InvalidPickError(f"{winner!r} is not playing in contest {contest_id}")
        updated = contest.model_copy(update={"result": result})
        contests = [updated if c.id == contest_id else c for c in self.contests]
        logger.info("Manual result contest id=%s winner=%s", contest_id, winner)
        return self.model_copy(update={"contests": contests})

    # --- persistence shape ---

    def to_document(self) -> WeekDocument:
        return WeekDocument(
            week_number=self.week_number,
            season=self.season,
            contests=self.contests,
            participants=self.participants,
            last_update=self.last_score_update,
        )

    @classmethod
    def from_document(cls, document: WeekDocument) -> "AppState":
        return cls(
            week_number=document.week_number,
            season=document.season,
            contests=document.contests,
            participants=document.participants,
            last_score_update=document.last_update,
        )


def initial_state(settings: Settings) -> AppState:
    return AppState(week_number=settings.default_week, season=settings.season)


class ScoreRefresher:
    """Fetches the scoreboard and reconciles it into a state.

    Only one refresh may be outstanding; a second call while one is in
    flight raises RefreshInProgressError.
    """

    def __init__(
        self,
        resolver: NameResolver,
        settings: Settings,
        fetch: Callable[[Optional[int], Settings], dict] = fetch_scoreboard,
    ) -> None:
        self.resolver = resolver
        self.settings = settings
        self._fetch = fetch
        self._in_flight = False

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    async def fetch_events(self, state: AppState) -> list[FeedEvent]:
        if not state.contests:
            raise NoScheduleError("Please upload a pick sheet first to set up games")
        if self._in_flight:
            raise RefreshInProgressError("A score refresh is already in progress")

        self._in_flight = True
        try:
            payload = await asyncio.to_thread(self._fetch, state.week_number, self.settings)
        except FeedFetchError:
            logger.exception("Score refresh failed; keeping existing contests")
            raise
        finally:
            self._in_flight = False
        return parse_scoreboard(payload)

    def apply(self, state: AppState, events: list[FeedEvent]) -> AppState:
        contests = reconcile(
            state.contests,
            events,
            self.resolver,
            tie_winner=self.settings.tie_winner,
        )
        return state.with_contests(contests)

    async def refresh(self, state: AppState) -> AppState:
        events = await self.fetch_events(state)
        return self.apply(state, events)
