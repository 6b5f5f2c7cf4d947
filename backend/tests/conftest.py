# backend/tests/conftest.py
import pytest
from fastapi.testclient import TestClient

from upkeep.core.db import SessionLocal
from upkeep.main import app
from upkeep.schemas.user import UserCreate
from upkeep.services import email_service, user_service

PASSWORD = "secret123"


@pytest.fixture
def outbox(monkeypatch):
    """SMTP yerine gönderilen mesajları biriktirir."""
    sent = []
    monkeypatch.setattr(email_service, "_deliver", lambda msg, config: sent.append(msg))
    return sent


@pytest.fixture
def client(tmp_path, monkeypatch, outbox):
    # Her test kendi sqlite dosyası + doküman klasörü + config dosyası
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'test.db'}")
    monkeypatch.setenv("UPLOAD_FOLDER", str(tmp_path / "docs"))
    monkeypatch.setenv("UPKEEP_CONFIG_PATH", str(tmp_path / "config.json"))
    with TestClient(app) as c:
        yield c


@pytest.fixture
def db(client):
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


def make_user(db, username, *, admin=False, ticket=False, password=PASSWORD):
    return user_service.create_user(db, UserCreate(
        Username=username,
        Password=password,
        FirstName=username.title(),
        LastName="Tester",
        Email=f"{username}@factory-test.com",
        IsAdmin=admin,
        TicketPermissions=ticket,
    ))


def login(client, username, password=PASSWORD):
    r = client.post("/auth/login", data={"username": username, "password": password})
    assert r.status_code == 200, r.text
    return {"Authorization": f"Bearer {r.json()['access_token']}"}


@pytest.fixture
def admin(client, db):
    user = make_user(db, "admin", admin=True, ticket=True)
    return user, login(client, "admin")


@pytest.fixture
def tech(client, db):
    user = make_user(db, "tech")
    return user, login(client, "tech")


@pytest.fixture
def machine(client, admin):
    _, headers = admin
    r = client.post("/machines", headers=headers, json={
        "Name": "Press 1",
        "Location": "Hall A",
        "SAPNumber": "SAP-100",
        "SerialNumber": "SN-100",
    })
    assert r.status_code == 201, r.text
    return r.json()["data"]
