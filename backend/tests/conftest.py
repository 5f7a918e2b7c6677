"""Pytest fixtures — throwaway SQLite database file for fast, isolated tests."""
import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from fastapi.testclient import TestClient

from vitrii_agenda.database import Base, get_db
from vitrii_agenda.main import app

# Import all models so they register with Base.metadata
from vitrii_agenda.models.user import User                                  # noqa: F401
from vitrii_agenda.models.advertiser import Advertiser, AdvertiserMember    # noqa: F401
from vitrii_agenda.models.event import Event                                # noqa: F401
from vitrii_agenda.models.waitlist_entry import WaitlistEntry               # noqa: F401
from vitrii_agenda.models.reservation import EventReservation             # noqa: F401


@pytest.fixture(scope="function")
def db_engine(tmp_path):
    """Create a fresh SQLite engine for each test."""
    engine = create_engine(f"sqlite:///{tmp_path / 'test.db'}", connect_args={"check_same_thread": False})

    # Enable WAL mode so a second session can read while another writes
    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def session_factory(db_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=db_engine)


@pytest.fixture(scope="function")
def db(session_factory):
    """Yield a database session, closed after the test."""
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def client(session_factory):
    """FastAPI TestClient with the database dependency overridden to use SQLite."""

    def _override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Helpers: create records via the API, return the JSON response dict
# ---------------------------------------------------------------------------
def as_user(user_id) -> dict:
    """Headers identifying the caller."""
    return {"x-user-id": str(user_id)}


def create_test_user(client: TestClient, name: str = "Test User", email: str = None) -> dict:
    """Helper — POST /api/usuarios and return response JSON."""
    resp = client.post("/api/usuarios", json={"nome": name, "email": email})
    assert resp.status_code == 201, resp.text
    return resp.json()


def create_test_advertiser(client: TestClient, owner_id: int, name: str = "Loja Teste") -> dict:
    """Helper — POST /api/anunciantes as ``owner_id`` and return response JSON."""
    resp = client.post("/api/anunciantes", json={"nome": name}, headers=as_user(owner_id))
    assert resp.status_code == 201, resp.text
    return resp.json()


def create_test_event(client: TestClient, owner_id: int, advertiser_id: int, title: str = "Evento",
                      start: str = "2025-03-01T10:00:00Z", end: str = "2025-03-01T11:00:00Z",
                      visibility: str = "publico") -> dict:
    """Helper — POST /api/eventos-agenda as ``owner_id`` and return response JSON."""
    resp = client.post("/api/eventos-agenda", json={
        "anuncianteId": advertiser_id,
        "titulo": title,
        "dataInicio": start,
        "dataFim": end,
        "privacidade": visibility,
    }, headers=as_user(owner_id))
    assert resp.status_code == 201, resp.text
    return resp.json()


def submit_test_request(client: TestClient, requester_id: int, advertiser_id: int, title: str = "Consulta",
                        start: str = "2025-03-01T10:00:00Z", end: str = "2025-03-01T11:00:00Z") -> dict:
    """Helper — POST /api/filas-espera as ``requester_id`` and return response JSON."""
    resp = client.post("/api/filas-espera", json={
        "anuncianteAlvoId": advertiser_id,
        "titulo": title,
        "dataInicio": start,
        "dataFim": end,
    }, headers=as_user(requester_id))
    assert resp.status_code == 201, resp.text
    return resp.json()
