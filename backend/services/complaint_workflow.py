"""Complaint lifecycle: raising, listing and resolving complaints.

A complaint starts ``Open`` and is moved to ``Resolved`` when an
administrator answers it. Status never moves backwards. Each answer is kept
as its own ``Resolution`` row; the most recently updated one is the answer
shown to administrators.
"""

import logging

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, aliased

from backend.core.errors import InternalError, InvalidTransitionError, NotFoundError, ValidationError
from backend.database import utcnow
from backend.models.complaint import Complaint, ComplaintStatus
from backend.models.resolution import Resolution

logger = logging.getLogger(__name__)

MIN_COMPLAINT_ID = -(2 ** 63)
MAX_COMPLAINT_ID = 2 ** 63 - 1

ALLOWED_TRANSITIONS = {
    ComplaintStatus.OPEN: {ComplaintStatus.IN_PROGRESS, ComplaintStatus.RESOLVED},
    ComplaintStatus.IN_PROGRESS: {ComplaintStatus.RESOLVED},
    # Further answers to a resolved complaint keep it resolved.
    ComplaintStatus.RESOLVED: {ComplaintStatus.RESOLVED},
}


def can_transition(current: ComplaintStatus, target: ComplaintStatus) -> bool:
    return target in ALLOWED_TRANSITIONS[current]


def advance_status(complaint: Complaint, target: ComplaintStatus) -> None:
    current = ComplaintStatus(complaint.complaint_status)
    if not can_transition(current, target):
        raise InvalidTransitionError(
            f"Complaint cannot move from {current.value} to {target.value}"
        )
    complaint.complaint_status = target
    complaint.updated = utcnow()


def _clean(value: str | None) -> str:
    return value.strip() if isinstance(value, str) else ""


def raise_complaint(
    db: Session,
    user_id: int,
    first_name: str | None,
    last_name: str | None,
    email: str | None,
    phone_number: str | None,
    complaint_detail: str | None,
) -> Complaint:
    fields = {
        "first_name": _clean(first_name),
        "last_name": _clean(last_name),
        "email": _clean(email),
        "phone_number": _clean(phone_number),
        "complaint_detail": _clean(complaint_detail),
    }
    if not all(fields.values()):
        raise ValidationError(
            "firstName, lastName, email, phoneNumber and complaintDetail are required"
        )

    complaint = Complaint(user_id=user_id, complaint_status=ComplaintStatus.OPEN, **fields)

    try:
        db.add(complaint)
        db.commit()
        db.refresh(complaint)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to raise complaint for user %s", user_id)
        raise InternalError() from exc

    logger.info("User %s raised complaint %s", user_id, complaint.id)
    return complaint


def fetch_complaints_by_user(db: Session, user_id: int) -> list[Complaint]:
    return db.query(Complaint).filter(
        Complaint.user_id == user_id,
    ).order_by(Complaint.created.desc(), Complaint.id.desc()).all()


def fetch_all_complaints(db: Session) -> list[tuple[Complaint, Resolution | None]]:
    """Every complaint with its latest resolution, newest complaint first."""
    ranked = db.query(
        Resolution.id.label("resolution_id"),
        Resolution.complaint_id.label("complaint_id"),
        func.row_number().over(
            partition_by=Resolution.complaint_id,
            order_by=(Resolution.updated.desc(), Resolution.id.desc()),
        ).label("rank"),
    ).subquery()
    latest = aliased(Resolution)

    return db.query(Complaint, latest).outerjoin(
        ranked,
        (ranked.c.complaint_id == Complaint.id) & (ranked.c.rank == 1),
    ).outerjoin(
        latest,
        latest.id == ranked.c.resolution_id,
    ).order_by(Complaint.created.desc(), Complaint.id.desc()).all()


def _parse_complaint_id(complaint_id) -> int | None:
    if isinstance(complaint_id, bool):
        return None
    if isinstance(complaint_id, int):
        parsed = complaint_id
    else:
        try:
            parsed = int(str(complaint_id).strip())
        except ValueError:
            return None
    # Anything outside a signed 64-bit integer cannot be a stored id.
    if not MIN_COMPLAINT_ID <= parsed <= MAX_COMPLAINT_ID:
        return None
    return parsed


def resolve_complaint(db: Session, complaint_id, response: str | None) -> tuple[Complaint, Resolution]:
    """Record an administrator's answer and mark the complaint resolved.

    The resolution row is flushed before the status change and both are
    committed together. A failure part-way leaves at worst an orphaned
    resolution, never a resolved complaint without an answer.
    """
    if complaint_id is None or not str(complaint_id).strip():
        raise ValidationError("Complaint ID is required")

    response = _clean(response)
    if not response:
        raise ValidationError("Response text is required")

    parsed_id = _parse_complaint_id(complaint_id)
    complaint = db.get(Complaint, parsed_id) if parsed_id is not None else None
    if complaint is None:
        raise NotFoundError("Complaint not found")

    resolution = Resolution(complaint_id=complaint.id, response=response)

    try:
        db.add(resolution)
        db.flush()
        advance_status(complaint, ComplaintStatus.RESOLVED)
        db.commit()
        db.refresh(complaint)
        db.refresh(resolution)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to resolve complaint %s", complaint_id)
        raise InternalError() from exc

    logger.info("Complaint %s resolved with resolution %s", complaint.id, resolution.id)
    return complaint, resolution
