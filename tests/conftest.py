import os

os.environ.setdefault('DATABASE_URL', 'sqlite://')
os.environ.setdefault('JWT_SECRET_KEY', 'test-jwt-secret-key-for-testing-only-0123456789')
os.environ.setdefault('BCRYPT_ROUNDS', '4')

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from backend.auth import jwt_handler, passwords  # noqa: E402
from backend.auth.jwt_handler import Identity  # noqa: E402
from backend.database import Base, get_db  # noqa: E402
from backend.main import app  # noqa: E402
from backend.models.complaint import Complaint, ComplaintStatus  # noqa: E402
from backend.models.resolution import Resolution  # noqa: E402
from backend.models.user import Role, User  # noqa: E402


@pytest.fixture
def session_factory():
    engine = create_engine(
        'sqlite://',
        connect_args={'check_same_thread': False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine, tables=[User.__table__, Complaint.__table__, Resolution.__table__])
    try:
        yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    def _make_user(
        email: str = 'citizen@example.com',
        phone_number: str = '5550000001',
        role: Role = Role.CITIZEN,
        password: str = 'secret1',
        full_name: str = 'Test User',
    ) -> User:
        user = User(
            full_name=full_name,
            email=email,
            phone_number=phone_number,
            role=role,
            hashed_password=passwords.hash_password(password),
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make_user


@pytest.fixture
def auth_headers():
    def _auth_headers(user: User) -> dict:
        token = jwt_handler.create_access_token(Identity.from_user(user))
        return {'Authorization': f'Bearer {token}'}

    return _auth_headers


@pytest.fixture
def make_complaint(db):
    def _make_complaint(user_id: int, detail: str = 'Street light is out', **overrides) -> Complaint:
        values = {
            'user_id': user_id,
            'first_name': 'Asha',
            'last_name': 'Rao',
            'email': 'asha@example.com',
            'phone_number': '5550000001',
            'complaint_detail': detail,
            'complaint_status': ComplaintStatus.OPEN,
        }
        values.update(overrides)
        complaint = Complaint(**values)
        db.add(complaint)
        db.commit()
        db.refresh(complaint)
        return complaint

    return _make_complaint
