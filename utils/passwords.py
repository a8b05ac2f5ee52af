"""Password strength policy."""

from __future__ import annotations

MIN_PASSWORD_LENGTH = 8
MAX_PASSWORD_LENGTH = 128


def validate_password_strength(password: object) -> list[str]:
    """Return the list of policy violations for ``password``; empty when valid."""

    if not isinstance(password, str) or not password:
        return ["Password is required"]

    errors = []
    if len(password) < MIN_PASSWORD_LENGTH:
        errors.append(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")
    if len(password) > MAX_PASSWORD_LENGTH:
        errors.append(f"Password must be at most {MAX_PASSWORD_LENGTH} characters long")
    if not any(ch.isupper() for ch in password):
        errors.append("Password must contain at least one uppercase letter")
    if not any(ch.islower() for ch in password):
        errors.append("Password must contain at least one lowercase letter")
    if not any(ch.isdigit() for ch in password):
        errors.append("Password must contain at least one number")
    if all(ch.isalnum() for ch in password):
        errors.append("Password must contain at least one special character")
    return errors
