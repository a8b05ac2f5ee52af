"""Utilities for validating incoming Flask requests."""

from __future__ import annotations

import re
from typing import Iterable
from urllib.parse import urlsplit

from flask import Request
from werkzeug.exceptions import BadRequest

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
SCHEME_PATTERN = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*$")
# Integer columns are 32-bit signed on PostgreSQL.
MAX_ID = 2**31 - 1


def parse_json_request(
    req: Request,
    *,
    required_keys: Iterable[str] | None = None,
    allow_empty: bool = False,
) -> dict:
    """Return the parsed JSON body or raise a 400 error."""

    if not req.is_json:
        raise BadRequest("Request content type must be application/json.")

    data = req.get_json(silent=True)
    if data is None:
        raise BadRequest("Request JSON body is required.")

    if not isinstance(data, dict):
        raise BadRequest("Request JSON payload must be an object.")

    if not data and not allow_empty:
        raise BadRequest("Request JSON body must not be empty.")

    if required_keys:
        missing = [key for key in required_keys if not data.get(key)]
        if missing:
            raise BadRequest(
                "Missing required fields: {}.".format(
                    ", ".join(sorted(missing))
                )
            )

    return data


def normalize_email(raw_email: object) -> str:
    """Normalize an email string by stripping whitespace and lowering case."""

    if not isinstance(raw_email, str):
        return ""
    return raw_email.strip().lower()


def is_valid_email(email: str) -> bool:
    return bool(email) and EMAIL_PATTERN.match(email) is not None


def is_valid_url(url: object) -> bool:
    """Return True for an absolute URL with a scheme and a host."""

    if not isinstance(url, str) or not url or any(ch.isspace() for ch in url):
        return False
    try:
        parts = urlsplit(url)
        # Accessing the port validates it.
        parts.port
    except ValueError:
        return False
    return bool(SCHEME_PATTERN.match(parts.scheme or "")) and bool(parts.hostname)


def parse_id(value: object, field: str) -> int:
    """Coerce an identifier from a query string or JSON body, or raise 400."""

    if value is None or value == "":
        raise BadRequest(f"{field} is required.")
    if isinstance(value, (bool, float)):
        raise BadRequest(f"{field} must be an integer.")
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        raise BadRequest(f"{field} must be an integer.")
    if parsed <= 0 or parsed > MAX_ID:
        raise BadRequest(f"{field} must be a positive integer.")
    return parsed


def clean_text(value: object, field: str) -> str | None:
    """Return a stripped string, ``None`` for falsy values, or raise 400."""

    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise BadRequest(f"{field} must be a string.")
    return value.strip() or None


def normalize_tags(value: object) -> str | None:
    """Accept a comma separated string or a list and return deduplicated tags."""

    if not value:
        return None
    if isinstance(value, str):
        raw_tags = value.split(",")
    elif isinstance(value, (list, tuple)):
        if not all(isinstance(tag, str) for tag in value):
            raise BadRequest("tags must be strings.")
        raw_tags = list(value)
    else:
        raise BadRequest("tags must be a string or a list of strings.")

    tags: list[str] = []
    seen: set[str] = set()
    for raw in raw_tags:
        tag = raw.strip()
        if not tag or tag.lower() in seen:
            continue
        seen.add(tag.lower())
        tags.append(tag)
    return ",".join(tags) or None
