import logging

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from backend.auth import jwt_handler
from backend.auth.jwt_handler import Identity
from backend.core.errors import ForbiddenError, MissingCredentialError
from backend.models.user import Role

logger = logging.getLogger(__name__)

# auto_error=False so a missing or non-Bearer header reaches our own 401.
security = HTTPBearer(auto_error=False)


def get_current_identity(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> Identity:
    if credentials is None or not credentials.credentials:
        raise MissingCredentialError()

    return jwt_handler.decode_access_token(credentials.credentials)


def require_role(role: Role):
    def check_role(identity: Identity = Depends(get_current_identity)) -> Identity:
        if identity.role != role:
            logger.warning(
                "Role check failed for user %s: has %s, needs %s",
                identity.id,
                identity.role.value,
                role.value,
            )
            raise ForbiddenError(f"Access denied. {role.value.capitalize()}s only.")
        return identity

    return check_role


require_admin = require_role(Role.ADMIN)
