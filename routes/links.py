"""Links blueprint: personal link CRUD and the public feed."""

from __future__ import annotations

from http import HTTPStatus

from flask import Blueprint, jsonify, request
from sqlalchemy import or_
from sqlalchemy.orm import joinedload
from werkzeug.exceptions import BadRequest, NotFound

from models import db
from models.group import Group
from models.link import LINK_VISIBILITIES, TITLE_MAX_LENGTH, Link
from models.user import User
from utils.identity import require_user
from utils.request_validation import (
    clean_text,
    is_valid_url,
    normalize_tags,
    parse_id,
    parse_json_request,
)

links_bp = Blueprint("links", __name__)


def _newest_first(query):
    return query.order_by(Link.created_at.desc(), Link.id.desc())


def _clean_title(value) -> str | None:
    title = clean_text(value, "title")
    if title and len(title) > TITLE_MAX_LENGTH:
        raise BadRequest(f"title must be {TITLE_MAX_LENGTH} characters or less")
    return title


def _clean_label(value, field: str) -> str:
    label = clean_text(value, field)
    if not label:
        raise BadRequest(f"{field} must not be empty")
    return label


def _clean_visibility(value) -> str:
    if value not in LINK_VISIBILITIES:
        raise BadRequest("visibility must be one of: " + ", ".join(LINK_VISIBILITIES))
    return value


def _resolve_group(value, user: User) -> int | None:
    """Return a group id the user may file links under, or None to unset."""

    if value in (None, ""):
        return None
    group_id = parse_id(value, "groupId")
    group = db.session.get(Group, group_id)
    if group is None or not group.can_read(user):
        raise BadRequest("groupId must reference a group you own or belong to")
    return group.id


def _require_valid_url(url) -> str:
    if not is_valid_url(url):
        raise BadRequest("Invalid URL format")
    return url


@links_bp.route("/links", methods=["GET"])
def list_links():
    """Return the requester's links, newest first."""

    user = require_user()
    links = _newest_first(Link.query.filter(Link.user_id == user.id)).all()
    return jsonify({"links": [link.to_dict() for link in links]})


@links_bp.route("/links", methods=["POST"])
def create_link():
    user = require_user()
    data = parse_json_request(request)

    if not data.get("url") or not data.get("source") or not data.get("category"):
        raise BadRequest("URL, source, and category are required")

    link = Link(
        user_id=user.id,
        url=_require_valid_url(data.get("url")),
        title=_clean_title(data.get("title")),
        source=_clean_label(data.get("source"), "source"),
        category=_clean_label(data.get("category"), "category"),
        tags=normalize_tags(data.get("tags")),
        description=clean_text(data.get("description"), "description"),
        visibility=_clean_visibility(data.get("visibility") or "private"),
        group_id=_resolve_group(data.get("groupId"), user),
    )
    db.session.add(link)
    db.session.commit()

    return (
        jsonify({"message": "Link created successfully", "link": link.to_dict()}),
        HTTPStatus.CREATED,
    )


@links_bp.route("/links", methods=["PUT"])
def update_link():
    """Partially update a link owned by the requester.

    ``url``, ``source``, ``category``, ``visibility`` and ``groupId`` keep their
    values when omitted; ``title``, ``tags`` and ``description`` are cleared
    when omitted or empty.
    """

    user = require_user()
    data = parse_json_request(request)
    link_id = parse_id(data.get("id"), "Link ID")

    url = data.get("url")
    if url:
        _require_valid_url(url)

    link = Link.query.filter_by(id=link_id, user_id=user.id).first()
    if link is None:
        raise NotFound("Link not found or you don't have permission to update it")

    if url:
        link.url = url
    if data.get("source"):
        link.source = _clean_label(data["source"], "source")
    if data.get("category"):
        link.category = _clean_label(data["category"], "category")
    if data.get("visibility"):
        link.visibility = _clean_visibility(data["visibility"])
    if "groupId" in data:
        link.group_id = _resolve_group(data["groupId"], user)

    link.title = _clean_title(data.get("title"))
    link.tags = normalize_tags(data.get("tags"))
    link.description = clean_text(data.get("description"), "description")

    db.session.commit()
    return jsonify({"message": "Link updated successfully", "link": link.to_dict()})


@links_bp.route("/links", methods=["DELETE"])
def delete_link():
    user = require_user()
    link_id = parse_id(request.args.get("id"), "Link ID")

    link = Link.query.filter_by(id=link_id, user_id=user.id).first()
    if link is None:
        raise NotFound("Link not found or you don't have permission to delete it")

    db.session.delete(link)
    db.session.commit()
    return jsonify({"message": "Link deleted successfully"})


@links_bp.route("/public-links", methods=["GET"])
def list_public_links():
    """Return every public link with its owner's name, with optional filters."""

    query = Link.query.options(joinedload(Link.owner)).filter(Link.visibility == "public")

    category = request.args.get("category")
    if category:
        query = query.filter(Link.category == category)

    source = request.args.get("source")
    if source:
        query = query.filter(Link.source == source)

    search_term = request.args.get("q")
    if search_term:
        like = f"%{search_term.lower()}%"
        query = query.filter(
            or_(
                db.func.lower(Link.title).like(like),
                db.func.lower(Link.description).like(like),
                db.func.lower(Link.url).like(like),
            )
        )

    links = _newest_first(query).all()
    return jsonify({"links": [link.to_dict(include_owner=True) for link in links]})
