"""Save, restore and list week documents."""

from __future__ import annotations

import logging

from sqlalchemy import desc
from sqlalchemy.orm import Session

from pickem.errors import DocumentNotFoundError
from pickem.models import WeekDocumentRow
from pickem.schemas import WeekDocument, WeekDocumentSummary

logger = logging.getLogger(__name__)


def _summary(row: WeekDocumentRow) -> WeekDocumentSummary:
    return WeekDocumentSummary(
        id=row.id,
        week_number=row.week_number,
        season=row.season,
        contest_count=row.contest_count,
        participant_count=row.participant_count,
        last_update=row.last_update_utc,
        created_at=row.created_at,
    )


def save_document(db: Session, document: WeekDocument) -> WeekDocumentSummary:
    row = WeekDocumentRow(
        week_number=document.week_number,
        season=document.season,
        contest_count=len(document.contests),
        participant_count=len(document.participants),
        last_update_utc=document.last_update,
        document_json=document.model_dump_json(),
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    logger.info(
        "Saved week document id=%s week=%s season=%s contests=%s participants=%s",
        row.id,
        row.week_number,
        row.season,
        row.contest_count,
        row.participant_count,
    )
    return _summary(row)


def list_documents(db: Session, limit: int = 50) -> list[WeekDocumentSummary]:
    rows = (
        db.query(WeekDocumentRow)
        .order_by(desc(WeekDocumentRow.id))
        .limit(limit)
        .all()
    )
    return [_summary(row) for row in rows]


def load_document(db: Session, document_id: int) -> WeekDocument:
    row = db.query(WeekDocumentRow).filter(WeekDocumentRow.id == document_id).one_or_none()
    if row is None:
        raise DocumentNotFoundError(f"Week document {document_id} not found")
    logger.info("Restoring week document id=%s week=%s", row.id, row.week_number)
    return WeekDocument.model_validate_json(row.document_json)
