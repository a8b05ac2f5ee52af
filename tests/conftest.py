"""Shared pytest fixtures for the application tests."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest
from flask import Flask
from flask.testing import FlaskClient

ROOT_DIR = Path(__file__).resolve().parent.parent
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from app import create_app  # noqa: E402
from config import Config  # noqa: E402
from mailer import MemoryMailer, get_mailer  # noqa: E402
from models import db  # noqa: E402
from models.user import User  # noqa: E402
from utils.identity import issue_session_token  # noqa: E402

DEFAULT_PASSWORD = "Secret#123"


class _BaseTestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    JWT_SECRET_KEY = "test-jwt-secret-key-with-enough-length-for-hs256"
    RATE_LIMIT = "1000 per minute"
    MAIL_BACKEND = "memory"
    MAIL_SENDER_ADDRESS = "no-reply@example.com"
    APP_BASE_URL = "https://links.example.com"


@pytest.fixture()
def app() -> Flask:
    """Create a Flask application instance for tests."""

    application = create_app(_BaseTestConfig)

    with application.app_context():
        db.create_all()

    yield application

    with application.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app: Flask) -> FlaskClient:
    """Return a test client for the Flask app."""

    return app.test_client()


@pytest.fixture()
def mailer(app: Flask) -> MemoryMailer:
    """Return the in-memory mailer the app sends through."""

    with app.app_context():
        return get_mailer()


@pytest.fixture()
def create_user(app: Flask):
    """Return a factory that persists a user and returns its id."""

    def _create(
        email: str,
        name: str = "Test User",
        password: str = DEFAULT_PASSWORD,
        *,
        verified: bool = True,
    ) -> int:
        with app.app_context():
            user = User(email=email, name=name, is_verified=verified)
            user.set_password(password)
            db.session.add(user)
            db.session.commit()
            return user.id

    return _create


@pytest.fixture()
def auth_headers(app: Flask):
    """Return a factory building bearer headers for a user id."""

    def _headers(user_id: int) -> dict[str, str]:
        with app.app_context():
            token = issue_session_token(db.session.get(User, user_id))
        return {"Authorization": f"Bearer {token}"}

    return _headers
