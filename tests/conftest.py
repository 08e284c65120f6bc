"""
Shared fixtures: every test gets its own SQLite file and a TestClient wired to it.

The client is built without entering its context manager, so the app lifespan
(which targets the configured database) never runs.
"""

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, SQLModel, create_engine

from barbershop import models  # noqa: F401  registers the tables
from barbershop.config import get_settings
from barbershop.db import get_session
from barbershop.main import app
from barbershop.routers.services_routes import seed_services

ADMIN_EMAIL = "owner@shop.com"
PASSWORD = "secret123"

MONDAY = "2030-01-07"
SATURDAY = "2030-01-12"
SUNDAY = "2030-01-13"


@pytest.fixture
def engine(tmp_path):
    db_path = tmp_path / "test_barbershop.db"
    engine = create_engine(
        f"sqlite:///{db_path}",
        connect_args={"check_same_thread": False},
    )
    SQLModel.metadata.create_all(engine)
    with Session(engine) as session:
        seed_services(session)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def client(engine, monkeypatch):
    """Test client talking to the per-test database."""
    monkeypatch.setattr(get_settings(), "bootstrap_admin_email", ADMIN_EMAIL)

    def override_get_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    yield TestClient(app)
    app.dependency_overrides.clear()


def signup(client, name, email, role="user"):
    res = client.post(
        "/users",
        json={"name": name, "email": email, "password": PASSWORD, "role": role},
    )
    assert res.status_code == 201, res.text
    return res.json()


def login(client, email):
    res = client.post("/auth/login", data={"username": email, "password": PASSWORD})
    assert res.status_code == 200, res.text
    return {"Authorization": f"Bearer {res.json()['access_token']}"}


def make_account(client, name, email, role="user"):
    user = signup(client, name, email, role)
    return {"id": user["id"], "headers": login(client, email)}


def service_id(client, name="haircut"):
    for service in client.get("/services").json():
        if service["name"] == name:
            return service["id"]
    raise AssertionError(f"service {name} not seeded")


@pytest.fixture
def admin(client):
    return make_account(client, "Owner", ADMIN_EMAIL, role="user")


@pytest.fixture
def customer(client):
    return make_account(client, "Ana Souza", "ana@example.com")


@pytest.fixture
def barber(client):
    return make_account(client, "Carlos", "carlos@shop.com", role="barber")


@pytest.fixture
def second_barber(client):
    return make_account(client, "Bruno", "bruno@shop.com", role="barber")
