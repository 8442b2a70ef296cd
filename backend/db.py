"""Database engine and session factory for the vehicle registry (SQLite dev, PostgreSQL prod)."""
from collections.abc import Generator
import os

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from utils.config import DATABASE_URL, REQUEST_TIMEOUT_SECONDS


def _assert_test_database(url: str) -> None:
    """With TESTING=true, refuse any URL that could be the real registry."""
    path = url.split("?")[0]
    if "registry.db" in path or (":memory:" not in path and "test" not in path.lower()):
        raise RuntimeError(
            "Tests must not run against the registry database. Set TESTING_DATABASE_URL to "
            "sqlite:///:memory: (or another URL containing :memory: or 'test')."
        )


def _connect_args(url: str) -> dict:
    """Driver connect arguments; PostgreSQL sessions get a statement_timeout matching the request budget."""
    if url.startswith("sqlite"):
        return {"check_same_thread": False}
    if url.startswith("postgresql"):
        return {"options": f"-c statement_timeout={int(REQUEST_TIMEOUT_SECONDS * 1000)}"}
    return {}


def _make_engine(url: str) -> Engine:
    if not url.startswith("sqlite"):
        # Long-lived pooled connections to a server database can go stale between requests.
        return create_engine(url, connect_args=_connect_args(url), pool_pre_ping=True)
    kw = {"connect_args": _connect_args(url)}
    # In-memory SQLite: one shared connection, otherwise every session sees an empty database.
    if ":memory:" in url:
        kw["poolclass"] = StaticPool
    return create_engine(url, **kw)


if os.environ.get("TESTING") == "true":
    _assert_test_database(DATABASE_URL)

engine = _make_engine(DATABASE_URL)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """FastAPI dependency: one session per request, closed on every exit path."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
