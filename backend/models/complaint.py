"""Complaint model definitions."""

import enum

from sqlalchemy import Column, DateTime, Enum, Integer, String, Text
from backend.database import Base, utcnow


class ComplaintStatus(str, enum.Enum):
    OPEN = "Open"
    IN_PROGRESS = "In Progress"
    RESOLVED = "Resolved"


class Complaint(Base):
    """A grievance raised by a user.

    The contact fields are a snapshot taken when the complaint is raised and
    are not kept in sync with the owner's profile.
    """
    __tablename__ = "complaints"

    id = Column(Integer, primary_key=True, index=True)
    # Owner id; not a hard foreign key.
    user_id = Column(Integer, index=True, nullable=False)
    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False)
    email = Column(String, nullable=False)
    phone_number = Column(String, nullable=False)
    complaint_detail = Column(Text, nullable=False)
    complaint_status = Column(
        Enum(
            ComplaintStatus,
            native_enum=False,
            values_callable=lambda statuses: [status.value for status in statuses],
        ),
        nullable=False,
        default=ComplaintStatus.OPEN,
        index=True,
    )
    created = Column(DateTime(timezone=True), default=utcnow, index=True)
    updated = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)
