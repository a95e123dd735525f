"""Resolution model definitions."""

from sqlalchemy import Column, DateTime, Index, Integer, Text
from backend.database import Base, utcnow


class Resolution(Base):
    """An administrator's answer to a complaint. Rows are append-only."""
    __tablename__ = "resolves"
    __table_args__ = (
        Index("idx_resolves_complaint_updated", "complaint_id", "updated"),
    )

    id = Column(Integer, primary_key=True)
    complaint_id = Column(Integer, nullable=False)
    response = Column(Text, nullable=False)
    created = Column(DateTime(timezone=True), default=utcnow)
    updated = Column(DateTime(timezone=True), default=utcnow)
