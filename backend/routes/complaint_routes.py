from datetime import datetime

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from backend.auth.dependencies import get_current_identity
from backend.auth.jwt_handler import Identity
from backend.core.schemas import CamelModel
from backend.database import get_db
from backend.services import complaint_workflow

router = APIRouter(tags=['complaints'])


class RaiseComplaintRequest(CamelModel):
    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    phone_number: str | None = None
    complaint_detail: str | None = None


class ComplaintResponse(CamelModel):
    id: int
    user_id: int
    first_name: str
    last_name: str
    email: str
    phone_number: str
    complaint_detail: str
    complaint_status: str
    created: datetime | None = None
    updated: datetime | None = None


class ComplaintEnvelope(CamelModel):
    success: bool = True
    message: str = ''
    data: ComplaintResponse


class ComplaintListEnvelope(CamelModel):
    success: bool = True
    message: str = ''
    data: list[ComplaintResponse]


def to_complaint_response(complaint) -> ComplaintResponse:
    return ComplaintResponse(
        id=complaint.id,
        user_id=complaint.user_id,
        first_name=complaint.first_name,
        last_name=complaint.last_name,
        email=complaint.email,
        phone_number=complaint.phone_number,
        complaint_detail=complaint.complaint_detail,
        complaint_status=complaint.complaint_status.value,
        created=complaint.created,
        updated=complaint.updated,
    )


@router.post('/raiseComplaint', response_model=ComplaintEnvelope, status_code=status.HTTP_201_CREATED)
def raise_complaint(
    data: RaiseComplaintRequest,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    complaint = complaint_workflow.raise_complaint(
        db,
        user_id=identity.id,
        first_name=data.first_name,
        last_name=data.last_name,
        email=data.email,
        phone_number=data.phone_number,
        complaint_detail=data.complaint_detail,
    )
    return ComplaintEnvelope(message='Complaint raised', data=to_complaint_response(complaint))


@router.get('/myComplaint', response_model=ComplaintListEnvelope)
def list_my_complaints(
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    complaints = complaint_workflow.fetch_complaints_by_user(db, identity.id)
    return ComplaintListEnvelope(
        message='Complaint data fetched successfully' if complaints else 'No complaints found for this user',
        data=[to_complaint_response(complaint) for complaint in complaints],
    )
