"""Shared fixtures: in-memory database, API client and logged-in users."""
import os

os.environ.setdefault("SECRET_KEY", "test-secret-key")

from datetime import date, datetime, timedelta
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from pharmacy.api.deps import get_db
from pharmacy.core.security import create_access_token, get_password_hash
from pharmacy.db.base import Base
from pharmacy.db.session import build_engine
from pharmacy.main import app
from pharmacy.models import Medicine, Role, User

PASSWORD = "Secret123!"


@pytest.fixture
def engine():
    engine = build_engine("sqlite://", poolclass=StaticPool)
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
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
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def add_medicine(db):
    """Insert a medicine row directly and return it."""

    def _add(
        name="Paracetamol",
        quantity=10,
        price="2.00",
        expiry_date=None,
        category="Analgesic",
        brand="Generic",
    ):
        medicine = Medicine(
            name=name,
            brand=brand,
            category=category,
            price=Decimal(price),
            quantity=quantity,
            expiry_date=expiry_date or date.today() + timedelta(days=365),
            updated_at=datetime(2025, 1, 1, 9, 0, 0),
        )
        db.add(medicine)
        db.commit()
        db.refresh(medicine)
        return medicine

    return _add


@pytest.fixture
def add_user(db):
    def _add(email, role=Role.PHARMACIST, active=True, name="Staff"):
        user = User(
            name=name,
            email=email,
            hashed_password=get_password_hash(PASSWORD),
            role=role.value,
            is_active=active,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _add


def _headers(user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user.email, user.role)}"}


@pytest.fixture
def admin(add_user):
    return add_user("admin@pharmacy.com", Role.ADMIN, name="System Admin")


@pytest.fixture
def pharmacist(add_user):
    return add_user("pharma@pharmacy.com", Role.PHARMACIST, name="Counter")


@pytest.fixture
def admin_headers(admin):
    return _headers(admin)


@pytest.fixture
def pharmacist_headers(pharmacist):
    return _headers(pharmacist)
