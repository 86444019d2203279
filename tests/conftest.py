# tests/conftest.py
import uuid
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.ext.asyncio import create_async_engine

import boosterhub.models  # noqa: F401  registers every table on the metadata
from boosterhub.auth import ADMIN_ROLE, create_access_token, hash_password
from boosterhub.config import Settings
from boosterhub.database import async_database_url, metadata
from boosterhub.main import create_app
from boosterhub.models import admin_users, booster_clubs
from boosterhub.services.audit_log_service import AuditLogService
from boosterhub.services.club_store import ClubStore
from boosterhub.services.payment_settings_service import PaymentSettingsService

ZELLE_URL = (
    "https://enroll.zellepay.com/qr-codes?data="
    "eyJuYW1lIjoiRUhTIEJBTkQgQk9PU1RFUlMiLCJhY3Rpb24iOiJwYXltZW50IiwidG9rZW4iOiJl"
    "aHNiYW5kYm9vc3RlcnN0cmVhc3VyZXJAb3V0bG9vay5jb20ifQ=="
)
STRIPE_URL = "https://buy.stripe.com/test_robotics"
SEEDED_AT = datetime(2024, 1, 15, 12, 0, 0, tzinfo=timezone.utc)

ADMIN_PASSWORD = "correct-horse-battery"
TEST_SECRET = "test-jwt-secret"


def _club(name, sort_order, **overrides):
    row = {
        "id": uuid.uuid4(),
        "name": name,
        "description": f"{name} supports our students",
        "website_url": None,
        "donation_url": None,
        "is_active": True,
        "sort_order": sort_order,
        "is_payment_enabled": False,
        "zelle_url": None,
        "stripe_url": None,
        "payment_instructions": None,
        "qr_code_settings": None,
        "zelle_qr_code_path": None,
        "last_payment_update_by": None,
        "last_payment_update_at": None,
        "created_at": SEEDED_AT,
        "updated_at": SEEDED_AT,
    }
    row.update(overrides)
    return row


@pytest.fixture(scope="session")
def admin_password_hash():
    return hash_password(ADMIN_PASSWORD)


@pytest.fixture
def database_url(tmp_path):
    return f"sqlite:///{tmp_path / 'boosterhub.db'}"


@pytest.fixture
def clubs(database_url, admin_password_hash):
    """Create the schema and seed clubs and admin users; returns rows by key"""
    engine = create_engine(database_url)
    metadata.create_all(engine)

    rows = {
        "band": _club(
            "EHS Band Boosters", 1,
            is_payment_enabled=True,
            zelle_url=ZELLE_URL,
            payment_instructions="Include your student's name in the memo",
            last_payment_update_by="seed",
            last_payment_update_at=SEEDED_AT,
        ),
        "choir": _club("Choir Boosters", 2, zelle_url=ZELLE_URL),
        "robotics": _club("Robotics Boosters", 3, is_payment_enabled=True, stripe_url=STRIPE_URL),
        "drama": _club(
            "Drama Boosters", 999,
            zelle_url="https://enroll.zellepay.com/qr-codes?data=PLACEHOLDER_drama",
        ),
        "retired": _club("Retired Boosters", 4, is_active=False, is_payment_enabled=True, zelle_url=ZELLE_URL),
    }

    admins = [
        {"username": "admin", "is_active": True, "is_locked": False},
        {"username": "locked", "is_active": True, "is_locked": True},
        {"username": "former", "is_active": False, "is_locked": False},
    ]

    with engine.begin() as conn:
        conn.execute(booster_clubs.insert(), list(rows.values()))
        for admin in admins:
            conn.execute(admin_users.insert().values(
                id=uuid.uuid4(),
                password_hash=admin_password_hash,
                full_name=admin["username"].title(),
                role="admin",
                must_change_password=False,
                last_login=None,
                created_at=SEEDED_AT,
                **admin,
            ))
    engine.dispose()

    return rows


@pytest.fixture
def settings(database_url):
    return Settings(
        _env_file=None,
        DATABASE_URL=database_url,
        JWT_SECRET_KEY=TEST_SECRET,
        BLOB_STORAGE_URL=None,
        BLOB_STORAGE_KEY=None,
    )


@pytest.fixture
def client(settings, clubs):
    with TestClient(create_app(settings)) as test_client:
        yield test_client


@pytest.fixture
def admin_headers(settings):
    token = create_access_token({"sub": "admin", "role": ADMIN_ROLE}, settings)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
async def connection(database_url, clubs):
    engine = create_async_engine(async_database_url(database_url))
    async with engine.connect() as conn:
        yield conn
    await engine.dispose()


@pytest.fixture
def service(connection):
    return PaymentSettingsService(ClubStore(connection), AuditLogService(connection))
