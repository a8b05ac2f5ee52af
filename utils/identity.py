"""Resolve the requesting user from the session token."""

from __future__ import annotations

from flask_jwt_extended import create_access_token, get_jwt_identity, verify_jwt_in_request
from werkzeug.exceptions import Unauthorized

from models import db
from models.user import User


def issue_session_token(user: User) -> str:
    """Return an access token whose subject is the user's numeric id."""

    return create_access_token(
        identity=str(user.id),
        additional_claims={"email": user.email, "name": user.name},
    )


def get_current_user() -> User | None:
    """Return the user named by the request's token, or None."""

    try:
        identity = get_jwt_identity()
    except RuntimeError:
        return None
    if identity is None:
        return None
    try:
        user_id = int(identity)
    except (TypeError, ValueError):
        return None
    return db.session.get(User, user_id)


def require_user() -> User:
    """Verify the token on the current request and return its user or raise 401."""

    verify_jwt_in_request()
    user = get_current_user()
    if user is None:
        raise Unauthorized("Unauthorized. Please sign in.")
    return user
