from sqlalchemy import Column, DateTime, Integer, Text
from sqlalchemy.sql import func

from .db import Base


class WeekDocumentRow(Base):
    __tablename__ = "week_documents"

    id = Column(Integer, primary_key=True, index=True)
    week_number = Column(Integer, nullable=False)
    season = Column(Integer, nullable=False)
    contest_count = Column(Integer, nullable=False, default=0)
    participant_count = Column(Integer, nullable=False, default=0)
    last_update_utc = Column(DateTime(timezone=True), nullable=True)
    document_json = Column(Text, nullable=False, default="")   # WeekDocument as JSON
    created_at = Column(DateTime(timezone=True), server_default=func.now())
