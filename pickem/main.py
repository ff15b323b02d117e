from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

from fastapi import Depends, FastAPI, HTTPException
from sqlalchemy.orm import Session

from pickem.db import Base, engine, get_db
from pickem.errors import (
    DocumentNotFoundError,
    FeedFetchError,
    InvalidPickError,
    NoScheduleError,
    PickemError,
    PickLockedError,
    RefreshInProgressError,
    ScheduleFormatError,
    UnknownContestError,
    UnknownParticipantError,
)
from pickem.log_buffer import get_buffer_handler, install_buffer_handler
from pickem.schemas import (
    Contest,
    ContestResultIn,
    Participant,
    ParticipantIn,
    ParticipantPatch,
    PickIn,
    RankedParticipant,
    ScheduleIn,
    StateOut,
    WeekDocumentSummary,
)
from pickem.settings import get_settings
from pickem.standings import pick_status
from pickem.state import AppState, ScoreRefresher, initial_state
from pickem.storage import list_documents, load_document, save_document
from pickem.teams import build_resolver

app = FastAPI(title="Pick'em Tracker")
logger = logging.getLogger(__name__)

_settings = get_settings()
# Replaced wholesale by every transition. Mutating routes are async so they
# all run on the event loop thread.
_state: AppState = initial_state(_settings)
_refresher = ScoreRefresher(build_resolver(_settings.alias_file), _settings)

_ERROR_STATUS: dict[type[PickemError], int] = {
    ScheduleFormatError: 422,
    FeedFetchError: 502,
    RefreshInProgressError: 409,
    NoScheduleError: 409,
    UnknownParticipantError: 404,
    UnknownContestError: 404,
    DocumentNotFoundError: 404,
    InvalidPickError: 400,
    PickLockedError: 409,
}


def get_state() -> AppState:
    return _state


def replace_state(state: AppState) -> AppState:
    global _state
    _state = state
    return _state


def _state_out(message: str | None = None) -> StateOut:
    return StateOut(
        week_number=_state.week_number,
        season=_state.season,
        contests=_state.contests,
        participants=_state.participants,
        last_score_update=_state.last_score_update,
        message=message,
    )


@contextmanager
def _http_errors() -> Iterator[None]:
    try:
        yield
    except PickemError as exc:
        status_code = _ERROR_STATUS.get(type(exc), 400)
        logger.warning("%s (%s): %s", type(exc).__name__, status_code, exc)
        raise HTTPException(status_code=status_code, detail=str(exc)) from exc


@app.on_event("startup")
async def startup() -> None:
    install_buffer_handler()
    Base.metadata.create_all(bind=engine)
    logger.info(
        "Pick'em starting: season=%s season_type=%s week=%s",
        _settings.season,
        _settings.season_type,
        _state.week_number,
    )


@app.get("/api/state", response_model=StateOut)
async def api_state():
    return _state_out()


@app.post("/api/schedule", response_model=StateOut)
async def api_load_schedule(payload: ScheduleIn):
    with _http_errors():
        state = replace_state(_state.load_schedule(payload.text))
    return _state_out(f"Loaded {len(state.contests)} games for Week {state.week_number}")


@app.post("/api/scores/refresh", response_model=StateOut)
async def api_refresh_scores():
    with _http_errors():
        events = await _refresher.fetch_events(_state)
    # Apply to whatever state is current once the fetch completes.
    replace_state(_refresher.apply(_state, events))
    return _state_out("Scores updated from ESPN!")


@app.post("/api/participants", response_model=Participant)
async def api_add_participant(payload: ParticipantIn):
    state, participant = _state.add_participant(payload.display_name)
    replace_state(state)
    return participant


@app.patch("/api/participants/{participant_id}", response_model=Participant)
async def api_update_participant(participant_id: int, payload: ParticipantPatch):
    with _http_errors():
        state = _state
        if payload.display_name is not None:
            state = state.rename_participant(participant_id, payload.display_name)
        if payload.tiebreaker is not None:
            state = state.set_tiebreaker(participant_id, payload.tiebreaker)
        # Unknown ids must 404 even for an empty patch.
        participant = state.participant(participant_id)
    replace_state(state)
    return participant


@app.put("/api/participants/{participant_id}/picks/{contest_id}", response_model=Participant)
async def api_set_pick(participant_id: int, contest_id: int, payload: PickIn):
    with _http_errors():
        replace_state(_state.set_pick(participant_id, contest_id, payload.team))
    return _state.participant(participant_id)


@app.get("/api/participants/{participant_id}/sheet")
async def api_participant_sheet(participant_id: int):
    with _http_errors():
        participant = _state.participant(participant_id)
    days: dict[str, list[dict]] = {}
    for day, contests in _state.contests_by_day().items():
        days[day] = [
            {
                "contest": contest.model_dump(),
                "pick": participant.picks.get(contest.id),
                "status": pick_status(contest, participant.picks.get(contest.id)),
            }
            for contest in contests
        ]
    return {
        "participant": participant.model_dump(),
        "days": days,
    }


@app.put("/api/contests/{contest_id}/result", response_model=Contest)
async def api_set_contest_result(contest_id: int, payload: ContestResultIn):
    with _http_errors():
        replace_state(_state.set_contest_winner(contest_id, payload.winner))
    return _state.contest(contest_id)


@app.get("/api/standings", response_model=list[RankedParticipant])
async def api_standings():
    return _state.standings()


@app.post("/api/documents", response_model=WeekDocumentSummary)
async def api_save_document(db: Session = Depends(get_db)):
    return save_document(db, _state.to_document())


@app.get("/api/documents", response_model=list[WeekDocumentSummary])
async def api_list_documents(limit: int = 50, db: Session = Depends(get_db)):
    return list_documents(db, limit=limit)


@app.post("/api/documents/{document_id}/restore", response_model=StateOut)
async def api_restore_document(document_id: int, db: Session = Depends(get_db)):
    with _http_errors():
        document = load_document(db, document_id)
    replace_state(AppState.from_document(document))
    return _state_out(f"Restored Week {document.week_number}")


@app.get("/api/logs")
def api_logs(limit: int = 100, level: str | None = None):
    handler = get_buffer_handler()
    return {"entries": handler.entries(limit=limit, min_level=level)}
