"""
Shared pytest fixtures for all test modules.

Uses an in-memory SQLite database (StaticPool) so every test
function gets a clean, isolated database. Settings are overridden through
FastAPI's dependency_overrides so no real PayU or SMTP credentials are needed.
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("LOG_JSON", "false")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from formpay import models  # noqa: F401  (registers tables on Base)
from formpay.config import Settings, get_settings
from formpay.database import Base, get_db
from formpay.models.payment import PaymentRecord
from formpay.utils.hashing import compute_callback_signature


TEST_KEY = "gtKFFx"
TEST_SALT = "eCwWELxi"
FRONTEND_URL = "https://front.example.com"
BASE_URL = "https://api.example.com"

TEST_ENGINE = create_engine(
    "sqlite:///:memory:",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=TEST_ENGINE)


def make_settings(**overrides) -> Settings:
    values = dict(
        ENVIRONMENT="development",
        PAYU_TEST_KEY=TEST_KEY,
        PAYU_TEST_SALT=TEST_SALT,
        PAYU_PRODUCTION_KEY="live-key",
        PAYU_PRODUCTION_SALT="live-salt",
        BASE_URL=BASE_URL,
        FRONTEND_URL=FRONTEND_URL,
        EMAIL_USER="",
        EMAIL_PASS="",
        ADMIN_EMAIL="",
    )
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture(autouse=True)
def reset_db():
    """Drop and recreate all tables before each test for full isolation."""
    Base.metadata.drop_all(bind=TEST_ENGINE)
    Base.metadata.create_all(bind=TEST_ENGINE)
    yield
    Base.metadata.drop_all(bind=TEST_ENGINE)


@pytest.fixture
def db(reset_db):
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def settings():
    return make_settings()


@pytest.fixture
def gateway(settings):
    return settings.gateway()


@pytest.fixture
def client(db, settings):
    """
    TestClient with the DB and settings dependencies overridden. Not used as a
    context manager, so the startup hook (which touches the real DB) is skipped.
    """
    from formpay.main import app

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_settings] = lambda: settings
    yield TestClient(app)
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Helpers — not fixtures — so any test file can import and call them directly.
# ---------------------------------------------------------------------------
def make_payment(
    db,
    txnid: str = "TXN_1700000000000_42",
    name: str = "Asha Verma",
    email: str = "asha@example.com",
    phone: str = "9876543210",
    amount: float = 1500.0,
    form_type: str = "course",
    status: str = "pending",
) -> PaymentRecord:
    record = PaymentRecord(
        txnid=txnid,
        name=name,
        email=email,
        phone=phone,
        amount=amount,
        form_type=form_type,
        status=status,
    )
    db.add(record)
    db.commit()
    db.refresh(record)
    return record


def callback_payload(record: PaymentRecord, status: str = "success", salt: str = TEST_SALT, **extra) -> dict:
    """A PayU success-callback body for ``record``, signed with ``salt``."""
    payload = {
        "mihpayid": "403993715521234567",
        "status": status,
        "txnid": record.txnid,
        "amount": f"{record.amount:.2f}",
        "productinfo": f"Stock Website {record.form_type} Payment",
        "firstname": record.name,
        "email": record.email,
        "phone": record.phone,
        "key": TEST_KEY,
    }
    payload.update(extra)
    payload["hash"] = compute_callback_signature(payload, salt)
    return payload
