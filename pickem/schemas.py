from __future__ import annotations

from datetime import datetime
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field, model_validator

Day = Literal["Thursday", "Friday", "Saturday", "Sunday", "Monday"]
DAYS: tuple[str, ...] = ("Thursday", "Friday", "Saturday", "Sunday", "Monday")

PickStatus = Literal["correct", "incorrect", "pending", "not_picked"]


class Unresolved(BaseModel):
    status: Literal["scheduled"] = "scheduled"
    away_score: int = 0
    home_score: int = 0


class InProgress(BaseModel):
    status: Literal["in_progress"] = "in_progress"
    away_score: int
    home_score: int
    leader: Optional[str] = None


class Final(BaseModel):
    status: Literal["final"] = "final"
    away_score: int
    home_score: int
    winner: str


Outcome = Annotated[Union[Unresolved, InProgress, Final], Field(discriminator="status")]


class Contest(BaseModel):
    """One scheduled game recovered from a pick sheet."""

    id: int
    away_name: str
    home_name: str
    day: Day
    kickoff: str
    result: Outcome = Field(default_factory=Unresolved)

    @model_validator(mode="after")
    def _check_result_names(self) -> "Contest":
        sides = (self.away_name, self.home_name)
        if isinstance(self.result, Final) and self.result.winner not in sides:
            raise ValueError(f"winner {self.result.winner!r} is not a side of contest {self.id}")
        if isinstance(self.result, InProgress) and self.result.leader not in (None, *sides):
            raise ValueError(f"leader {self.result.leader!r} is not a side of contest {self.id}")
        return self

    @property
    def winner(self) -> Optional[str]:
        if isinstance(self.result, Final):
            return self.result.winner
        return None


class Participant(BaseModel):
    id: int
    display_name: str
    picks: dict[int, str] = Field(default_factory=dict)
    tiebreaker: int = 0


class RankedParticipant(BaseModel):
    rank: int
    id: int
    display_name: str
    picks: dict[int, str]
    tiebreaker: int
    correct: int
    incorrect: int
    pending: int
    total: int


class ParseResult(BaseModel):
    week_number: Optional[int] = None
    contests: list[Contest] = Field(default_factory=list)

    @property
    def no_matches(self) -> bool:
        return not self.contests


class FeedCompetitor(BaseModel):
    name: str
    score: str = "0"


class FeedEvent(BaseModel):
    """
    Internal representation of one scoreboard event used by the reconciler.
    """

    event_id: Optional[str] = None
    status_name: str
    home: FeedCompetitor
    away: FeedCompetitor


class WeekDocument(BaseModel):
    week_number: int
    season: int
    contests: list[Contest]
    participants: list[Participant]
    last_update: Optional[datetime] = None


class WeekDocumentSummary(BaseModel):
    id: int
    week_number: int
    season: int
    contest_count: int
    participant_count: int
    last_update: Optional[datetime]
    created_at: Optional[datetime]


# --- API bodies ---


class ScheduleIn(BaseModel):
    text: str


class ParticipantIn(BaseModel):
    display_name: Optional[str] = None


class ParticipantPatch(BaseModel):
    display_name: Optional[str] = None
    tiebreaker: Optional[int] = None


class PickIn(BaseModel):
    team: str


class ContestResultIn(BaseModel):
    winner: Optional[str] = None


class StateOut(BaseModel):
    week_number: int
    season: int
    contests: list[Contest]
    participants: list[Participant]
    last_score_update: Optional[datetime]
    message: Optional[str] = None
