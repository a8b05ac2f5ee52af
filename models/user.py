"""User model definition."""

import secrets
from datetime import datetime, timedelta
from typing import Optional

from werkzeug.security import check_password_hash, generate_password_hash

from . import db, utcnow


CODE_LENGTH = 6
DEFAULT_CODE_TTL = timedelta(minutes=15)


def generate_code() -> str:
    """Return a zero-padded numeric one-time code."""

    return str(secrets.randbelow(10**CODE_LENGTH)).zfill(CODE_LENGTH)


def _code_matches(expected: Optional[str], expires_at: Optional[datetime], code: str) -> bool:
    if not expected or expires_at is None:
        return False
    if expires_at < utcnow():
        return False
    return secrets.compare_digest(expected, (code or "").strip())


class User(db.Model):
    """Represents a registered account."""

    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    is_verified = db.Column(
        db.Boolean,
        nullable=False,
        default=False,
        server_default=db.false(),
    )
    verification_code = db.Column(db.String(CODE_LENGTH), nullable=True)
    verification_code_expires_at = db.Column(db.DateTime, nullable=True)
    reset_password_code = db.Column(db.String(CODE_LENGTH), nullable=True)
    reset_password_code_expires_at = db.Column(db.DateTime, nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    links = db.relationship(
        "Link",
        back_populates="owner",
        cascade="all, delete-orphan",
    )
    owned_groups = db.relationship(
        "Group",
        back_populates="owner",
        cascade="all, delete-orphan",
    )
    memberships = db.relationship(
        "GroupMember",
        back_populates="user",
        cascade="all, delete-orphan",
    )
    custom_categories = db.relationship("CustomCategory", cascade="all, delete-orphan")
    custom_sources = db.relationship("CustomSource", cascade="all, delete-orphan")

    def set_password(self, password: str) -> None:
        """Hash and store the password."""

        self.password_hash = generate_password_hash(password)

    def check_password(self, password: str) -> bool:
        """Verify a password against the stored hash."""

        return check_password_hash(self.password_hash, password)

    def issue_verification_code(self, ttl: timedelta = DEFAULT_CODE_TTL) -> str:
        """Rotate the email verification code and return it."""

        self.verification_code = generate_code()
        self.verification_code_expires_at = utcnow() + ttl
        return self.verification_code

    def verify_email(self, code: str) -> bool:
        """Mark the account verified if ``code`` is the current, unexpired code."""

        if not _code_matches(self.verification_code, self.verification_code_expires_at, code):
            return False
        self.is_verified = True
        self.verification_code = None
        self.verification_code_expires_at = None
        return True

    def issue_reset_code(self, ttl: timedelta = DEFAULT_CODE_TTL) -> str:
        """Rotate the password reset code and return it."""

        self.reset_password_code = generate_code()
        self.reset_password_code_expires_at = utcnow() + ttl
        return self.reset_password_code

    def reset_password(self, code: str, new_password: str) -> bool:
        """Consume the reset code and store ``new_password``.

        The code is single use: it is cleared on success and once it has
        expired.
        """

        if self.reset_password_code_expires_at and self.reset_password_code_expires_at < utcnow():
            self.reset_password_code = None
            self.reset_password_code_expires_at = None
            return False
        if not _code_matches(self.reset_password_code, self.reset_password_code_expires_at, code):
            return False
        self.set_password(new_password)
        self.reset_password_code = None
        self.reset_password_code_expires_at = None
        return True

    def to_dict(self) -> dict:
        """Serialize the public identity of the user."""

        return {
            "id": self.id,
            "email": self.email,
            "name": self.name,
            "isVerified": self.is_verified,
        }

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        return f"<User {self.email}>"
