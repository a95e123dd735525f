"""Account lifecycle: signup, login, profile maintenance and admin user management."""

import logging

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from backend.auth import jwt_handler, passwords
from backend.auth.jwt_handler import Identity
from backend.core import config
from backend.core.errors import (
    ConflictError,
    ForbiddenError,
    InternalError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from backend.database import utcnow
from backend.models.user import Role, User

logger = logging.getLogger(__name__)

# Profile fields an owner may change. Email is deliberately absent.
PROFILE_FIELDS = ("full_name", "phone_number", "address", "city", "state", "pincode", "profile_image_url")
# Fields that keep their current value when an empty string is supplied.
KEEP_WHEN_BLANK_FIELDS = {"full_name", "phone_number", "profile_image_url"}


def _clean(value: str | None) -> str:
    return value.strip() if isinstance(value, str) else ""


def normalize_email(email: str | None) -> str:
    return _clean(email).lower()


def _commit(db: Session, action: str) -> None:
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise ConflictError("User already exists with this email or phone number") from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Database failure while trying to %s", action)
        raise InternalError() from exc


def signup(
    db: Session,
    full_name: str | None,
    email: str | None,
    phone_number: str | None,
    password: str | None,
    role: str | None,
) -> tuple[User, str]:
    full_name = _clean(full_name)
    email = normalize_email(email)
    phone_number = _clean(phone_number)

    if not full_name or not email or not phone_number or not password or not _clean(role):
        raise ValidationError("All fields are required")

    parsed_role = Role.parse(role)
    if parsed_role is None:
        raise ValidationError(f"Role must be one of: {', '.join(r.value for r in Role)}")
    if parsed_role is Role.ADMIN and not config.ALLOW_ADMIN_SIGNUP:
        raise ForbiddenError("Admin accounts cannot be self-registered")

    existing_user = db.query(User).filter(
        or_(User.email == email, User.phone_number == phone_number)
    ).first()
    if existing_user:
        raise ConflictError("User already exists with this email or phone number")

    user = User(
        full_name=full_name,
        email=email,
        phone_number=phone_number,
        role=parsed_role,
        hashed_password=passwords.hash_password(password),
    )
    db.add(user)
    _commit(db, "sign up")
    db.refresh(user)

    logger.info("Registered user %s with role %s", user.id, parsed_role.value)
    return user, jwt_handler.create_access_token(Identity.from_user(user))


def login(
    db: Session,
    email: str | None,
    phone_number: str | None,
    password: str | None,
) -> tuple[User, str]:
    email = normalize_email(email)
    phone_number = _clean(phone_number)

    if (not email and not phone_number) or not password:
        raise ValidationError("Email or phone number and password are required")

    filters = []
    if email:
        filters.append(User.email == email)
    if phone_number:
        filters.append(User.phone_number == phone_number)

    user = db.query(User).filter(or_(*filters)).first()

    # Same error for an unknown account and a bad password.
    if user is None or not passwords.verify_password(password, user.hashed_password):
        logger.warning("Failed login for %s", email or phone_number)
        raise UnauthorizedError("Invalid credentials")

    return user, jwt_handler.create_access_token(Identity.from_user(user))


def get_profile(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


def update_profile(db: Session, user_id: int, changes: dict) -> User:
    """Apply a partial profile update.

    Keys missing from ``changes`` (or set to ``None``) are left untouched.
    ``email`` is immutable and ignored if present.
    """
    user = get_profile(db, user_id)

    for field in PROFILE_FIELDS:
        value = changes.get(field)
        if value is None:
            continue
        value = _clean(value)
        if field in KEEP_WHEN_BLANK_FIELDS and not value:
            continue
        setattr(user, field, value)

    if user.phone_number and db.query(User).filter(
        User.phone_number == user.phone_number,
        User.id != user.id,
    ).first():
        db.rollback()
        raise ConflictError("Phone number is already registered")

    user.updated = utcnow()
    _commit(db, "update profile")
    db.refresh(user)
    return user


def list_users(db: Session) -> list[User]:
    return db.query(User).order_by(User.created.desc(), User.id.desc()).all()


def update_user_role(db: Session, user_id: int, role: str | None) -> User:
    parsed_role = Role.parse(role)
    if parsed_role is None:
        raise ValidationError(f"Role must be one of: {', '.join(r.value for r in Role)}")

    user = get_profile(db, user_id)
    user.role = parsed_role
    user.updated = utcnow()
    _commit(db, "update user role")
    db.refresh(user)

    logger.info("User %s role changed to %s", user.id, parsed_role.value)
    return user


def ensure_default_admin(db: Session) -> User | None:
    """Make sure the configured bootstrap administrator exists."""
    admin_email = normalize_email(config.DEFAULT_ADMIN_EMAIL)
    admin_phone = _clean(config.DEFAULT_ADMIN_PHONE)
    admin_password = config.DEFAULT_ADMIN_PASSWORD
    if not admin_email or not admin_phone or not admin_password:
        return None

    admin_user = db.query(User).filter(User.email == admin_email).first()
    if admin_user:
        if admin_user.role != Role.ADMIN:
            admin_user.role = Role.ADMIN
            _commit(db, "promote default admin")
        return admin_user

    admin_user = User(
        full_name=config.DEFAULT_ADMIN_NAME,
        email=admin_email,
        phone_number=admin_phone,
        role=Role.ADMIN,
        hashed_password=passwords.hash_password(admin_password),
    )
    db.add(admin_user)
    _commit(db, "create default admin")
    db.refresh(admin_user)

    logger.info("Created default admin %s", admin_email)
    return admin_user
