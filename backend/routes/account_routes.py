from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from backend.auth.dependencies import get_current_identity
from backend.auth.jwt_handler import Identity
from backend.core.schemas import CamelModel
from backend.database import get_db
from backend.services import accounts

router = APIRouter(tags=['accounts'])


class SignupRequest(CamelModel):
    full_name: str | None = None
    email: str | None = None
    phone_number: str | None = None
    password: str | None = None
    role: str | None = None


class LoginRequest(CamelModel):
    email: str | None = None
    phone_number: str | None = None
    password: str | None = None


class UpdateProfileRequest(CamelModel):
    full_name: str | None = None
    phone_number: str | None = None
    address: str | None = None
    city: str | None = None
    state: str | None = None
    pincode: str | None = None
    profile_image_url: str | None = None


class PublicUserResponse(CamelModel):
    id: int
    full_name: str
    email: str
    phone_number: str
    role: str


class ProfileResponse(PublicUserResponse):
    address: str = ''
    city: str = ''
    state: str = ''
    pincode: str = ''
    profile_image_url: str = ''


class AuthResponse(CamelModel):
    success: bool = True
    token: str
    user: PublicUserResponse


class ProfileEnvelope(CamelModel):
    success: bool = True
    message: str = ''
    user: ProfileResponse


def to_profile(user) -> ProfileResponse:
    return ProfileResponse(
        id=user.id,
        full_name=user.full_name,
        email=user.email,
        phone_number=user.phone_number,
        role=user.role.value,
        address=user.address or '',
        city=user.city or '',
        state=user.state or '',
        pincode=user.pincode or '',
        profile_image_url=user.profile_image_url or '',
    )


def to_public_user(user) -> PublicUserResponse:
    return PublicUserResponse(
        id=user.id,
        full_name=user.full_name,
        email=user.email,
        phone_number=user.phone_number,
        role=user.role.value,
    )


@router.post('/signup', response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def signup(data: SignupRequest, db: Session = Depends(get_db)):
    user, token = accounts.signup(
        db,
        full_name=data.full_name,
        email=data.email,
        phone_number=data.phone_number,
        password=data.password,
        role=data.role,
    )
    return AuthResponse(token=token, user=to_public_user(user))


@router.post('/login', response_model=AuthResponse)
def login(data: LoginRequest, db: Session = Depends(get_db)):
    user, token = accounts.login(
        db,
        email=data.email,
        phone_number=data.phone_number,
        password=data.password,
    )
    return AuthResponse(token=token, user=to_public_user(user))


@router.get('/profile', response_model=ProfileEnvelope)
def get_profile(
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    user = accounts.get_profile(db, identity.id)
    return ProfileEnvelope(user=to_profile(user))


@router.post('/update-profile', response_model=ProfileEnvelope)
def update_profile(
    data: UpdateProfileRequest,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    user = accounts.update_profile(db, identity.id, data.model_dump(exclude_unset=True))
    return ProfileEnvelope(message='Profile updated successfully', user=to_profile(user))
