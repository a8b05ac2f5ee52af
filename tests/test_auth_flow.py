"""Tests covering signup, verification, sign-in and password reset."""

from __future__ import annotations

from datetime import timedelta

import pytest
from flask.testing import FlaskClient

from models import db, utcnow
from models.user import User

from conftest import DEFAULT_PASSWORD

SIGNUP_PAYLOAD = {"email": "a@x.com", "password": "Aa1!aaaa", "name": "Ann"}


def _get_user(app, email: str) -> User | None:
    with app.app_context():
        user = User.query.filter_by(email=email).first()
        if user is not None:
            db.session.expunge(user)
        return user


def test_signup_creates_unverified_user_and_sends_code(app, client: FlaskClient, mailer):
    response = client.post("/api/signup", json=SIGNUP_PAYLOAD)

    assert response.status_code == 201
    payload = response.get_json()
    assert payload["email"] == "a@x.com"
    assert payload["requiresVerification"] is True

    user = _get_user(app, "a@x.com")
    assert user is not None
    assert user.is_verified is False
    assert user.name == "Ann"
    assert user.password_hash != "Aa1!aaaa"
    assert len(user.verification_code) == 6
    assert user.verification_code_expires_at > utcnow()

    assert len(mailer.outbox) == 1
    message = mailer.outbox[0]
    assert message.recipient == "a@x.com"
    assert message.subject == "Verify Your Email"
    assert user.verification_code in message.html


def test_signup_normalizes_email(app, client: FlaskClient):
    payload = dict(SIGNUP_PAYLOAD, email="  A@X.com ")

    response = client.post("/api/signup", json=payload)

    assert response.status_code == 201
    assert _get_user(app, "a@x.com") is not None


def test_signup_mail_failure_removes_user(app, client: FlaskClient, mailer):
    mailer.fail = True

    response = client.post("/api/signup", json=SIGNUP_PAYLOAD)

    assert response.status_code == 500
    assert "verification email" in response.get_json()["detail"]
    assert _get_user(app, "a@x.com") is None


def test_signup_again_while_unverified_resends_code(app, client: FlaskClient, mailer):
    client.post("/api/signup", json=SIGNUP_PAYLOAD)
    first_code = _get_user(app, "a@x.com").verification_code

    response = client.post("/api/signup", json=SIGNUP_PAYLOAD)

    assert response.status_code == 200
    assert response.get_json()["message"] == "Verification code resent"
    assert len(mailer.outbox) == 2
    with app.app_context():
        assert User.query.filter_by(email="a@x.com").count() == 1
    user = _get_user(app, "a@x.com")
    assert user.verification_code in mailer.outbox[-1].html
    assert first_code in mailer.outbox[0].html


def test_signup_resend_failure_keeps_user(app, client: FlaskClient, mailer):
    client.post("/api/signup", json=SIGNUP_PAYLOAD)
    mailer.fail = True

    response = client.post("/api/signup", json=SIGNUP_PAYLOAD)

    assert response.status_code == 500
    assert _get_user(app, "a@x.com") is not None


def test_signup_conflicts_with_verified_account(client: FlaskClient, create_user):
    create_user("a@x.com", verified=True)

    response = client.post("/api/signup", json=SIGNUP_PAYLOAD)

    assert response.status_code == 409


@pytest.mark.parametrize(
    "payload, detail",
    [
        ({"email": "a@x.com", "password": "Aa1!aaaa"}, "All fields are required"),
        ({"email": "not-an-email", "password": "Aa1!aaaa", "name": "Ann"}, "Invalid email format"),
        ({"email": "a@x.com", "password": "Aa1!a", "name": "Ann"}, "at least 8 characters"),
        ({"email": "a@x.com", "password": "aa1!aaaa", "name": "Ann"}, "uppercase"),
        ({"email": "a@x.com", "password": "Aaa!aaaa", "name": "Ann"}, "number"),
        ({"email": "a@x.com", "password": "Aa1aaaaa", "name": "Ann"}, "special character"),
    ],
)
def test_signup_validation(app, client: FlaskClient, mailer, payload, detail):
    response = client.post("/api/signup", json=payload)

    assert response.status_code == 400
    assert detail in response.get_json()["detail"]
    assert _get_user(app, "a@x.com") is None
    assert mailer.outbox == []


def test_verify_email_with_code(app, client: FlaskClient, mailer):
    client.post("/api/signup", json=SIGNUP_PAYLOAD)
    code = _get_user(app, "a@x.com").verification_code

    response = client.post("/api/verify-email", json={"email": "a@x.com", "code": code})

    assert response.status_code == 200
    assert response.get_json()["user"]["isVerified"] is True
    user = _get_user(app, "a@x.com")
    assert user.is_verified is True
    assert user.verification_code is None
    assert mailer.outbox[-1].subject == "Welcome to Our Platform!"


def test_verify_email_rejects_wrong_code(app, client: FlaskClient):
    client.post("/api/signup", json=SIGNUP_PAYLOAD)
    code = _get_user(app, "a@x.com").verification_code
    wrong = "000000" if code != "000000" else "111111"

    response = client.post("/api/verify-email", json={"email": "a@x.com", "code": wrong})

    assert response.status_code == 400
    assert _get_user(app, "a@x.com").is_verified is False


def test_verify_email_rejects_expired_code(app, client: FlaskClient):
    client.post("/api/signup", json=SIGNUP_PAYLOAD)
    with app.app_context():
        user = User.query.filter_by(email="a@x.com").first()
        user.verification_code_expires_at = utcnow() - timedelta(minutes=1)
        db.session.commit()
        code = user.verification_code

    response = client.post("/api/verify-email", json={"email": "a@x.com", "code": code})

    assert response.status_code == 400


def test_verify_email_unknown_account(client: FlaskClient):
    response = client.post("/api/verify-email", json={"email": "nobody@x.com", "code": "123456"})

    assert response.status_code == 404


def test_login_returns_session_token(client: FlaskClient, create_user):
    user_id = create_user("j1@example.com", name="Jay")

    response = client.post(
        "/api/login",
        json={"email": "J1@example.com", "password": DEFAULT_PASSWORD},
    )

    assert response.status_code == 200
    data = response.get_json()
    assert data["access_token"]
    assert data["user"] == {
        "id": user_id,
        "email": "j1@example.com",
        "name": "Jay",
        "isVerified": True,
    }

    session = client.get(
        "/api/session",
        headers={"Authorization": f"Bearer {data['access_token']}"},
    )
    assert session.status_code == 200
    assert session.get_json()["user"]["id"] == user_id


@pytest.mark.parametrize(
    "payload, status_code",
    [
        ({"email": "j1@example.com"}, 400),
        ({"password": DEFAULT_PASSWORD}, 400),
        ({"email": "j1@example.com", "password": "wrong"}, 401),
        ({"email": "other@example.com", "password": DEFAULT_PASSWORD}, 401),
    ],
)
def test_login_validation(client: FlaskClient, create_user, payload, status_code):
    create_user("j1@example.com")

    response = client.post("/api/login", json=payload)

    assert response.status_code == status_code


def test_login_matches_normalized_email_exactly(app, client: FlaskClient, create_user):
    create_user("j1@example.com")
    with app.app_context():
        legacy = User(email="Legacy@Example.com", name="Legacy", is_verified=True)
        legacy.set_password(DEFAULT_PASSWORD)
        db.session.add(legacy)
        db.session.commit()

    normalized = client.post("/api/login", json={"email": " J1@Example.COM ", "password": DEFAULT_PASSWORD})
    mixed_case_row = client.post(
        "/api/login", json={"email": "Legacy@Example.com", "password": DEFAULT_PASSWORD}
    )

    assert normalized.status_code == 200
    assert mixed_case_row.status_code == 401


def test_session_requires_token(client: FlaskClient):
    response = client.get("/api/session")

    assert response.status_code == 401


def test_session_for_deleted_user_is_unauthorized(app, client: FlaskClient, create_user, auth_headers):
    user_id = create_user("gone@example.com")
    headers = auth_headers(user_id)
    with app.app_context():
        db.session.delete(db.session.get(User, user_id))
        db.session.commit()

    response = client.get("/api/session", headers=headers)

    assert response.status_code == 401


def test_forgot_password_sends_reset_code(app, client: FlaskClient, create_user, mailer):
    create_user("reset@example.com", name="Rae")

    response = client.post("/api/forgot-password", json={"email": "reset@example.com"})

    assert response.status_code == 200
    user = _get_user(app, "reset@example.com")
    assert user.reset_password_code is not None
    assert user.reset_password_code_expires_at > utcnow()
    assert mailer.outbox[-1].subject == "Reset Your Password"
    assert user.reset_password_code in mailer.outbox[-1].html


def test_forgot_password_rotates_code(app, client: FlaskClient, create_user, mailer):
    create_user("reset@example.com")
    client.post("/api/forgot-password", json={"email": "reset@example.com"})
    client.post("/api/forgot-password", json={"email": "reset@example.com"})

    user = _get_user(app, "reset@example.com")
    assert len(mailer.outbox) == 2
    assert user.reset_password_code in mailer.outbox[-1].html


@pytest.mark.parametrize(
    "email, verified, status_code",
    [
        ("missing@example.com", True, 404),
        ("pending@example.com", False, 400),
    ],
)
def test_forgot_password_failures(client: FlaskClient, create_user, email, verified, status_code):
    create_user("pending@example.com", verified=verified)

    response = client.post("/api/forgot-password", json={"email": email})

    assert response.status_code == status_code


def test_forgot_password_mail_failure(client: FlaskClient, create_user, mailer):
    create_user("reset@example.com")
    mailer.fail = True

    response = client.post("/api/forgot-password", json={"email": "reset@example.com"})

    assert response.status_code == 500


def test_reset_password_with_code(app, client: FlaskClient, create_user, mailer):
    create_user("reset@example.com")
    client.post("/api/forgot-password", json={"email": "reset@example.com"})
    code = _get_user(app, "reset@example.com").reset_password_code

    response = client.post(
        "/api/reset-password",
        json={"email": "reset@example.com", "code": code, "password": "N3w!Passw0rd"},
    )

    assert response.status_code == 200
    assert mailer.outbox[-1].subject == "Password Reset Successful"
    assert _get_user(app, "reset@example.com").reset_password_code is None

    old_login = client.post(
        "/api/login", json={"email": "reset@example.com", "password": DEFAULT_PASSWORD}
    )
    new_login = client.post(
        "/api/login", json={"email": "reset@example.com", "password": "N3w!Passw0rd"}
    )
    assert old_login.status_code == 401
    assert new_login.status_code == 200

    reused = client.post(
        "/api/reset-password",
        json={"email": "reset@example.com", "code": code, "password": "An0ther!Pass"},
    )
    assert reused.status_code == 400


def test_reset_password_rejects_expired_code(app, client: FlaskClient, create_user):
    create_user("reset@example.com")
    client.post("/api/forgot-password", json={"email": "reset@example.com"})
    with app.app_context():
        user = User.query.filter_by(email="reset@example.com").first()
        user.reset_password_code_expires_at = utcnow() - timedelta(seconds=1)
        db.session.commit()
        code = user.reset_password_code

    response = client.post(
        "/api/reset-password",
        json={"email": "reset@example.com", "code": code, "password": "N3w!Passw0rd"},
    )

    assert response.status_code == 400
    assert _get_user(app, "reset@example.com").reset_password_code is None


def test_reset_password_enforces_policy(client: FlaskClient, create_user):
    create_user("reset@example.com")

    response = client.post(
        "/api/reset-password",
        json={"email": "reset@example.com", "code": "123456", "password": "weak"},
    )

    assert response.status_code == 400
