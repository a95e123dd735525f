"""User model definitions."""

import enum

from sqlalchemy import Column, DateTime, Enum, Integer, String
from backend.database import Base, utcnow


class Role(str, enum.Enum):
    """Closed set of account roles; values are the strings used on the wire."""

    CITIZEN = "Citizen"
    EMPLOYEE = "Employee"
    ADMIN = "admin"

    @classmethod
    def parse(cls, value: str | None) -> "Role | None":
        if value is None:
            return None
        normalized = value.strip().lower()
        for role in cls:
            if role.value.lower() == normalized:
                return role
        return None


class User(Base):
    """Represents a registered citizen, employee or administrator."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    full_name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    phone_number = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    role = Column(
        Enum(Role, native_enum=False, values_callable=lambda roles: [role.value for role in roles]),
        nullable=False,
        default=Role.CITIZEN,
    )
    address = Column(String, default="")
    city = Column(String, default="")
    state = Column(String, default="")
    pincode = Column(String, default="")
    profile_image_url = Column(String, default="")
    created = Column(DateTime(timezone=True), default=utcnow)
    updated = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)
