# Set test environment before any application or db imports.
import base64
import json
import os
import tempfile
import time
import uuid

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

os.environ["TESTING"] = "true"
os.environ["TESTING_DATABASE_URL"] = "sqlite:///:memory:"


def _generate_key_pair() -> tuple[str, str]:
    """Return (private PEM, public PEM) for a fresh RSA key."""
    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    private_pem = key.private_bytes(
        serialization.Encoding.PEM,
        serialization.PrivateFormat.PKCS8,
        serialization.NoEncryption(),
    ).decode()
    public_pem = key.public_key().public_bytes(
        serialization.Encoding.PEM,
        serialization.PublicFormat.SubjectPublicKeyInfo,
    ).decode()
    return private_pem, public_pem


SIGNING_KEY_PEM, PUBLIC_KEY_PEM = _generate_key_pair()

with tempfile.NamedTemporaryFile("w", prefix="test_registry_", suffix=".pem", delete=False) as _key_file:
    _key_file.write(PUBLIC_KEY_PEM)
os.environ["PUBLIC_KEY_PATH"] = _key_file.name

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy.orm import Session

from db import SessionLocal, get_db
from main import app
from models import Base
from models.vehicle import Vehicle  # noqa: F401 - register with Base
from utils.config import MDS_CONTENT_TYPE


def _get_engine():
    """Engine used by the app (in-memory when TESTING=true)."""
    return SessionLocal.kw["bind"]


@pytest.fixture(scope="session")
def engine():
    """One in-memory engine per test run; create tables once."""
    eng = _get_engine()
    Base.metadata.create_all(eng)
    return eng


@pytest.fixture
def db_session(engine):
    """Function-scoped session; each test runs in a transaction that is rolled back."""
    connection = engine.connect()
    trans = connection.begin()
    session = Session(bind=connection)
    session.begin_nested()
    try:
        yield session
    finally:
        session.close()
        if trans.is_active:
            trans.rollback()
        connection.close()


def _override_get_db(session):
    """Return a generator that yields the given session (for dependency override)."""
    def override():
        yield session
    return override


@pytest.fixture
def client(db_session):
    """API test client; overrides get_db to use the test db_session, cleared on teardown."""
    app.dependency_overrides[get_db] = _override_get_db(db_session)
    try:
        with TestClient(app) as c:
            yield c
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def signing_key_pem():
    """Private key matching the public key the app loads at startup."""
    return SIGNING_KEY_PEM


@pytest.fixture
def public_key_pem():
    return PUBLIC_KEY_PEM


@pytest.fixture
def provider_id():
    """A fresh provider per test so rows never collide across tests."""
    return uuid.uuid4()


@pytest.fixture
def make_token(signing_key_pem):
    """Factory: signed JWT for a provider. Extra claims override the defaults."""
    def make(provider, algorithm="RS256", key=None, **claims):
        payload = {"provider_id": str(provider), "iat": int(time.time()), **claims}
        return jwt.encode(payload, key or signing_key_pem, algorithm=algorithm)
    return make


def _b64url(data: dict) -> str:
    return base64.urlsafe_b64encode(json.dumps(data).encode()).rstrip(b"=").decode()


@pytest.fixture
def make_unsigned_token():
    """Factory: well-formed JWT with alg "none" and an empty signature."""
    def make(provider):
        return f"{_b64url({'alg': 'none', 'typ': 'JWT'})}.{_b64url({'provider_id': str(provider)})}."
    return make


@pytest.fixture
def auth_headers(make_token):
    """Factory: request headers authenticated as a provider, with the MDS content type."""
    def headers(provider):
        return {
            "Authorization": f"Bearer {make_token(provider)}",
            "Content-Type": MDS_CONTENT_TYPE,
        }
    return headers


@pytest.fixture
def make_vehicle():
    """Factory: a valid vehicle payload in canonical wire form for a provider."""
    def make(provider, **overrides):
        vehicle = {
            "device_id": str(uuid.uuid4()),
            "provider_id": str(provider),
            "vehicle_type": "moped",
            "propulsion_types": ["combustion", "electric"],
            "vehicle_attributes": {},
            "accessibility_attributes": {},
        }
        vehicle.update(overrides)
        return vehicle
    return make


def pytest_sessionfinish(session, exitstatus):
    """Remove the temporary public key file written for the run."""
    try:
        os.remove(os.environ["PUBLIC_KEY_PATH"])
    except OSError:
        pass
