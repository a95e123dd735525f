from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import jwt

from backend.core import config
from backend.core.errors import InvalidTokenError
from backend.models.user import Role


@dataclass(frozen=True)
class Identity:
    """Claims carried by an access token."""

    id: int
    email: str
    phone_number: str
    role: Role

    @classmethod
    def from_user(cls, user) -> "Identity":
        return cls(id=user.id, email=user.email, phone_number=user.phone_number, role=Role(user.role))


def create_access_token(identity: Identity, expires_minutes: int | None = None) -> str:
    expire_minutes = expires_minutes or config.JWT_EXPIRES_MINUTES
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(identity.id),
        "id": identity.id,
        "email": identity.email,
        "phoneNumber": identity.phone_number,
        "role": identity.role.value,
        "iat": now,
        "exp": now + timedelta(minutes=expire_minutes),
    }
    return jwt.encode(payload, config.JWT_SECRET_KEY, algorithm=config.JWT_ALGORITHM)


def decode_access_token(token: str) -> Identity:
    # Every failure collapses to one error so callers cannot tell
    # an expired token from a forged or malformed one.
    try:
        payload = jwt.decode(
            token,
            config.JWT_SECRET_KEY,
            algorithms=[config.JWT_ALGORITHM],
            options={"require": ["exp", "iat", "sub"]},
        )
    except jwt.PyJWTError as exc:
        raise InvalidTokenError() from exc

    user_id = payload.get("id")
    role = Role.parse(payload.get("role")) if isinstance(payload.get("role"), str) else None
    email = payload.get("email")
    phone_number = payload.get("phoneNumber")
    if not isinstance(user_id, int) or isinstance(user_id, bool) or role is None:
        raise InvalidTokenError()
    if not isinstance(email, str) or not isinstance(phone_number, str):
        raise InvalidTokenError()
    if payload["sub"] != str(user_id):
        raise InvalidTokenError()

    return Identity(id=user_id, email=email, phone_number=phone_number, role=role)
