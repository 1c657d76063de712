"""Authentication endpoint tests."""

from pathlib import Path

from fastapi.testclient import TestClient
from sqlalchemy import create_engine, select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from workload.core.config import settings
from workload.core.security import get_password_hash
from workload.db import session as db_session
from workload.db.base import Base
from workload.main import app
from workload.models import User


def _build_test_engine(db_file: Path) -> Engine:
    return create_engine(
        f"sqlite:///{db_file}",
        connect_args={"check_same_thread": False},
    )


def _setup_db(tmp_path: Path, monkeypatch, name: str) -> sessionmaker:
    engine = _build_test_engine(tmp_path / name)
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)
    monkeypatch.setattr(db_session, "engine", engine)
    monkeypatch.setattr(db_session, "SessionLocal", testing_session_local)
    return testing_session_local


def test_register_creates_customer(tmp_path: Path, monkeypatch) -> None:
    """Register should create a customer account and return identity fields."""
    session_local = _setup_db(tmp_path, monkeypatch, "test_register.db")

    with TestClient(app) as client:
        response = client.post(
            "/api/v1/auth/register",
            json={"email": "User@Example.com", "password": "secret123"},
        )
        duplicate = client.post(
            "/api/v1/auth/register",
            json={"email": "user@example.com", "password": "secret123"},
        )

    assert response.status_code == 201
    body = response.json()
    assert body["id"] > 0
    assert body["email"] == "user@example.com"
    assert body["role"] == "CUSTOMER"
    assert body["is_admin"] is False
    assert duplicate.status_code == 400

    with session_local() as db:
        user = db.scalar(select(User).where(User.email == "user@example.com").limit(1))
        assert user is not None
        assert user.username == "user"


def test_login_and_me(tmp_path: Path, monkeypatch) -> None:
    """Login should return a bearer token that resolves to the current user."""
    _setup_db(tmp_path, monkeypatch, "test_login.db")

    with TestClient(app) as client:
        client.post("/api/v1/auth/register", json={"email": "me@example.com", "password": "secret123"})
        login_response = client.post(
            "/api/v1/auth/login",
            json={"email": "me@example.com", "password": "secret123"},
        )
        assert login_response.status_code == 200
        assert login_response.json()["token_type"] == "bearer"

        token = login_response.json()["access_token"]
        me_response = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
        bad_token = client.get("/api/v1/auth/me", headers={"Authorization": "Bearer not-a-token"})

    assert me_response.status_code == 200
    assert me_response.json()["email"] == "me@example.com"
    assert bad_token.status_code == 401


def test_wrong_password_and_inactive_user_are_rejected(tmp_path: Path, monkeypatch) -> None:
    session_local = _setup_db(tmp_path, monkeypatch, "test_login_rejects.db")
    with session_local() as db:
        db.add(User(username="gone", email="gone@example.com", password_hash=get_password_hash("secret123"), role="CUSTOMER", is_active=False))
        db.commit()

    with TestClient(app) as client:
        wrong_password = client.post("/api/v1/auth/login", json={"email": "gone@example.com", "password": "nope"})
        inactive = client.post("/api/v1/auth/login", json={"email": "gone@example.com", "password": "secret123"})

    assert wrong_password.status_code == 401
    assert inactive.status_code == 401


def test_startup_bootstraps_configured_admin(tmp_path: Path, monkeypatch) -> None:
    session_local = _setup_db(tmp_path, monkeypatch, "test_bootstrap.db")
    monkeypatch.setattr(settings, "admin_user", "owner")
    monkeypatch.setattr(settings, "admin_pass", "owner-pass")

    with TestClient(app) as client:
        login = client.post("/api/v1/auth/login", json={"email": "owner", "password": "owner-pass"})
        me = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {login.json()['access_token']}"})

    assert login.status_code == 200
    assert me.json()["is_admin"] is True

    with session_local() as db:
        admins = db.scalars(select(User).where(User.role == "ADMIN")).all()
    assert [admin.username for admin in admins] == ["owner"]


def test_register_rejects_taken_username_fallback(tmp_path: Path, monkeypatch) -> None:
    """Register should refuse when both username candidates are already in use."""
    session_local = _setup_db(tmp_path, monkeypatch, "test_register_username_taken.db")
    with session_local() as db:
        db.add(User(username="user", email="first@example.com", password_hash="x", role="CUSTOMER", is_active=True))
        db.add(
            User(
                username="user@example.com",
                email="second@example.com",
                password_hash="x",
                role="CUSTOMER",
                is_active=True,
            )
        )
        db.commit()

    with TestClient(app) as client:
        response = client.post(
            "/api/v1/auth/register",
            json={"email": "user@example.com", "password": "secret123"},
        )

    assert response.status_code == 400
    assert response.json()["detail"] == "Username already taken"
    with session_local() as db:
        assert db.scalar(select(User).where(User.email == "user@example.com").limit(1)) is None
