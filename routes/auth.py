"""Authentication blueprint: signup, email verification, sign-in and password reset."""

from __future__ import annotations

from datetime import timedelta
from http import HTTPStatus

from flask import Blueprint, current_app, jsonify, request
from sqlalchemy.exc import IntegrityError
from werkzeug.exceptions import BadRequest, Conflict, InternalServerError, NotFound, Unauthorized

from mailer import MailDeliveryError
from mailer.notifications import (
    send_password_reset_email,
    send_reset_success_email,
    send_verification_email,
    send_welcome_email,
)
from models import db
from models.user import User
from utils.identity import issue_session_token, require_user
from utils.passwords import validate_password_strength
from utils.request_validation import is_valid_email, normalize_email, parse_json_request

auth_bp = Blueprint("auth", __name__)


def _code_ttl() -> timedelta:
    return timedelta(minutes=int(current_app.config.get("VERIFICATION_CODE_TTL_MINUTES", 15)))


def _find_user(email: str) -> User | None:
    return User.query.filter_by(email=email).first()


def _require_account(payload: dict) -> User:
    email = normalize_email(payload.get("email"))
    if not email:
        raise BadRequest("Email is required")
    user = _find_user(email)
    if user is None:
        raise NotFound("No account found with this email address")
    return user


def _check_password_policy(password: object) -> None:
    errors = validate_password_strength(password)
    if errors:
        raise BadRequest(errors[0])


@auth_bp.route("/signup", methods=["POST"])
def signup() -> tuple:
    """Register an unverified account and email it a verification code.

    Signing up again with the email of an account that was never verified
    rotates and resends the code instead of failing.
    """
    payload = parse_json_request(request)
    email = normalize_email(payload.get("email"))
    password = payload.get("password")
    name = payload.get("name")
    name = name.strip() if isinstance(name, str) else ""

    if not email or not password or not name:
        raise BadRequest("All fields are required")
    if not is_valid_email(email):
        raise BadRequest("Invalid email format")
    _check_password_policy(password)

    existing = _find_user(email)
    if existing is not None:
        if existing.is_verified:
            raise Conflict("User with this email already exists")

        code = existing.issue_verification_code(_code_ttl())
        db.session.commit()
        try:
            send_verification_email(existing.email, code, existing.name)
        except MailDeliveryError:
            raise InternalServerError("Failed to send verification email")
        return (
            jsonify(
                {
                    "message": "Verification code resent",
                    "email": existing.email,
                    "requiresVerification": True,
                }
            ),
            HTTPStatus.OK,
        )

    user = User(email=email, name=name, is_verified=False)
    user.set_password(password)
    code = user.issue_verification_code(_code_ttl())
    db.session.add(user)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise Conflict("User with this email already exists")

    try:
        send_verification_email(user.email, code, user.name)
    except MailDeliveryError:
        current_app.logger.warning("Removing unverified user %s after mail failure", user.email)
        db.session.delete(user)
        db.session.commit()
        raise InternalServerError("Failed to send verification email. Please try again.")

    return (
        jsonify(
            {
                "message": "Verification code sent to your email",
                "email": user.email,
                "requiresVerification": True,
            }
        ),
        HTTPStatus.CREATED,
    )


@auth_bp.route("/verify-email", methods=["POST"])
def verify_email() -> tuple:
    """Confirm an account with the code from the verification email."""
    payload = parse_json_request(request)
    code = payload.get("code")
    if not isinstance(code, str) or not code.strip():
        raise BadRequest("Email and verification code are required")

    user = _require_account(payload)
    if user.is_verified:
        return jsonify({"message": "Email is already verified", "user": user.to_dict()}), HTTPStatus.OK

    if not user.verify_email(code):
        raise BadRequest("Invalid or expired verification code")
    db.session.commit()

    try:
        send_welcome_email(user.email, user.name)
    except MailDeliveryError:
        current_app.logger.warning("Verified %s without a welcome email", user.email)

    return jsonify({"message": "Email verified successfully", "user": user.to_dict()}), HTTPStatus.OK


@auth_bp.route("/login", methods=["POST"])
def login() -> tuple:
    """Authenticate a user and return a session token."""
    payload = parse_json_request(request)
    email = normalize_email(payload.get("email"))
    password = payload.get("password")

    if not email or not isinstance(password, str) or not password:
        raise BadRequest("Email and password are required.")

    user = _find_user(email)
    if user is None or not user.check_password(password):
        raise Unauthorized("Invalid email or password.")

    return (
        jsonify({"access_token": issue_session_token(user), "user": user.to_dict()}),
        HTTPStatus.OK,
    )


@auth_bp.route("/session", methods=["GET"])
def session() -> tuple:
    """Return the identity behind the presented session token."""
    user = require_user()
    return jsonify({"user": user.to_dict()}), HTTPStatus.OK


@auth_bp.route("/forgot-password", methods=["POST"])
def forgot_password() -> tuple:
    """Email a fresh password reset code to a verified account."""
    payload = parse_json_request(request)
    user = _require_account(payload)
    if not user.is_verified:
        raise BadRequest("Please verify your email first before resetting password")

    code = user.issue_reset_code(_code_ttl())
    db.session.commit()

    try:
        send_password_reset_email(user.email, code, user.name)
    except MailDeliveryError:
        raise InternalServerError("Failed to send reset email. Please try again.")

    return jsonify({"message": "Reset code sent to your email"}), HTTPStatus.OK


@auth_bp.route("/reset-password", methods=["POST"])
def reset_password() -> tuple:
    """Set a new password using the code from the reset email."""
    payload = parse_json_request(request)
    code = payload.get("code")
    password = payload.get("password")
    if not isinstance(code, str) or not code.strip() or not password:
        raise BadRequest("Email, reset code and new password are required")
    _check_password_policy(password)

    user = _require_account(payload)
    reset = user.reset_password(code, password)
    # An expired code is cleared even though the reset fails.
    db.session.commit()
    if not reset:
        raise BadRequest("Invalid or expired reset code")

    try:
        send_reset_success_email(user.email)
    except MailDeliveryError:
        current_app.logger.warning("Reset password for %s without a confirmation email", user.email)

    return jsonify({"message": "Password reset successfully"}), HTTPStatus.OK
