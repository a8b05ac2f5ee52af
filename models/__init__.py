"""Database initialization and model exports."""

from datetime import UTC, datetime

from flask_sqlalchemy import SQLAlchemy


db = SQLAlchemy()


def utcnow() -> datetime:
    """Return the current UTC time as a naive datetime, matching stored columns."""

    return datetime.now(UTC).replace(tzinfo=None)


# Import models to register them with SQLAlchemy metadata.
from .user import User  # noqa: E402,F401
from .group import Group, GroupMember  # noqa: E402,F401
from .link import Link  # noqa: E402,F401
from .custom_vocabulary import CustomCategory, CustomSource  # noqa: E402,F401

__all__ = [
    "db",
    "utcnow",
    "User",
    "Group",
    "GroupMember",
    "Link",
    "CustomCategory",
    "CustomSource",
]
