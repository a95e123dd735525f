from datetime import datetime

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from backend.auth.dependencies import require_admin
from backend.auth.jwt_handler import Identity
from backend.core.schemas import CamelModel
from backend.database import get_db
from backend.routes.account_routes import ProfileResponse, to_profile
from backend.routes.complaint_routes import ComplaintResponse, to_complaint_response
from backend.services import accounts, complaint_workflow

router = APIRouter(tags=['admin'])


class ResolveComplaintRequest(CamelModel):
    response: str | None = None


class UpdateRoleRequest(CamelModel):
    role: str | None = None


class ResolutionResponse(CamelModel):
    id: int
    complaint_id: int
    response: str
    created: datetime | None = None
    updated: datetime | None = None


class AdminComplaintResponse(ComplaintResponse):
    resolution: ResolutionResponse | None = None


class AdminComplaintListEnvelope(CamelModel):
    success: bool = True
    message: str = ''
    data: list[AdminComplaintResponse]


class ResolvedComplaint(CamelModel):
    complaint: ComplaintResponse
    resolve: ResolutionResponse


class ResolveEnvelope(CamelModel):
    success: bool = True
    message: str = ''
    data: ResolvedComplaint


class UserListEnvelope(CamelModel):
    success: bool = True
    data: list[ProfileResponse]


class UserEnvelope(CamelModel):
    success: bool = True
    message: str = ''
    data: ProfileResponse


def to_resolution_response(resolution) -> ResolutionResponse:
    return ResolutionResponse(
        id=resolution.id,
        complaint_id=resolution.complaint_id,
        response=resolution.response,
        created=resolution.created,
        updated=resolution.updated,
    )


@router.get('/all-complaints', response_model=AdminComplaintListEnvelope)
def list_all_complaints(
    _admin: Identity = Depends(require_admin),
    db: Session = Depends(get_db),
):
    rows = complaint_workflow.fetch_all_complaints(db)
    return AdminComplaintListEnvelope(
        message='' if rows else 'No complaints found',
        data=[
            AdminComplaintResponse(
                **to_complaint_response(complaint).model_dump(),
                resolution=to_resolution_response(resolution) if resolution is not None else None,
            )
            for complaint, resolution in rows
        ],
    )


@router.post('/resolve-complaint', response_model=ResolveEnvelope)
def resolve_complaint(
    data: ResolveComplaintRequest,
    complaint_id: str | None = Query(default=None, alias='complaintId'),
    _admin: Identity = Depends(require_admin),
    db: Session = Depends(get_db),
):
    complaint, resolution = complaint_workflow.resolve_complaint(db, complaint_id, data.response)
    return ResolveEnvelope(
        message='Complaint resolved successfully',
        data=ResolvedComplaint(
            complaint=to_complaint_response(complaint),
            resolve=to_resolution_response(resolution),
        ),
    )


@router.get('/users', response_model=UserListEnvelope)
def list_users(
    _admin: Identity = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return UserListEnvelope(data=[to_profile(user) for user in accounts.list_users(db)])


@router.patch('/users/{user_id}/role', response_model=UserEnvelope)
def update_user_role(
    user_id: int,
    data: UpdateRoleRequest,
    _admin: Identity = Depends(require_admin),
    db: Session = Depends(get_db),
):
    user = accounts.update_user_role(db, user_id, data.role)
    return UserEnvelope(message='User role updated', data=to_profile(user))
