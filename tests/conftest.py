# tests/conftest.py
# Общие фикстуры: in-memory SQLite на каждый тест, быстрый bcrypt, JWT для ролей.
import os

# Окружение должно быть задано до импорта identity_service (settings читаются при импорте)
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret"
os.environ["ALGORITHM"] = "HS256"
os.environ["INTERNAL_API_KEY"] = "test-internal-key"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["ENVIRONMENT"] = "test"

from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy.orm import sessionmaker

from identity_service.core.phone import PhoneValidator, get_phone_validator
from identity_service.core.security import PasswordHasher, get_password_hasher
from identity_service.db.base import Base
from identity_service.db.session import build_engine, get_db
from identity_service.main import create_app
from identity_service.models.user import RoleEnum
from identity_service.services.user_service import UserService

INTERNAL_KEY = "test-internal-key"

# Примерные номера из метаданных libphonenumber — гарантированно валидны
BR_MOBILE = "11961234567"
BR_MOBILE_E164 = "+5511961234567"
US_NUMBER = "2015550123"
US_NUMBER_E164 = "+12015550123"


@pytest.fixture
def engine():
    engine = build_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def hasher():
    return PasswordHasher(rounds=4)


@pytest.fixture
def phone_validator():
    return PhoneValidator()


@pytest.fixture
def service(db, phone_validator, hasher):
    return UserService(db, phone_validator, hasher)


@pytest.fixture
def client(session_factory, phone_validator, hasher):
    app = create_app()

    def _get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_phone_validator] = lambda: phone_validator
    app.dependency_overrides[get_password_hasher] = lambda: hasher
    return TestClient(app)


def make_token(user_id, role: RoleEnum = RoleEnum.user, secret: str = "test-secret") -> str:
    """JWT в формате Auth-Service: sub = id пользователя, role = роль."""
    payload = {
        "sub": str(user_id),
        "role": role.value,
        "exp": datetime.utcnow() + timedelta(minutes=30),
    }
    return jwt.encode(payload, secret, algorithm="HS256")


def auth_headers(user_id, role: RoleEnum = RoleEnum.user) -> dict:
    return {"Authorization": f"Bearer {make_token(user_id, role)}"}
