"""Category and source vocabularies: fixed defaults plus per-user custom entries."""

from __future__ import annotations

from http import HTTPStatus

from flask import Blueprint, jsonify, request
from sqlalchemy.exc import IntegrityError
from werkzeug.exceptions import BadRequest

from models import db
from models.custom_vocabulary import (
    DEFAULT_CATEGORIES,
    DEFAULT_SOURCES,
    CustomCategory,
    CustomSource,
)
from models.user import User
from utils.identity import require_user
from utils.request_validation import parse_json_request

vocabulary_bp = Blueprint("vocabulary", __name__)


def _custom_names(model, user: User) -> list[str]:
    entries = model.query.filter(model.user_id == user.id).order_by(model.created_at, model.id).all()
    return [entry.name.lower() for entry in entries]


def _add_term(model, defaults: tuple[str, ...], label: str):
    """Store a custom term for the requester unless it already exists.

    Returns ``(payload, status)``; an existing default or custom term is a 200
    no-op rather than an error.
    """

    user = require_user()
    data = parse_json_request(request)
    name = data.get("name")
    if not isinstance(name, str) or not name.strip():
        raise BadRequest(f"{label.capitalize()} name is required")

    name = name.strip().lower()
    if name in defaults:
        return {"message": f"{label.capitalize()} already exists in defaults"}, HTTPStatus.OK
    if name in _custom_names(model, user):
        return {"message": f"{label.capitalize()} already exists"}, HTTPStatus.OK

    entry = model(user_id=user.id, name=name)
    db.session.add(entry)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        return {"message": f"{label.capitalize()} already exists"}, HTTPStatus.OK

    return {"message": f"{label.capitalize()} added successfully", label: entry.to_dict()}, HTTPStatus.CREATED


@vocabulary_bp.route("/categories", methods=["GET"])
def list_categories():
    user = require_user()
    return jsonify({"categories": list(DEFAULT_CATEGORIES) + _custom_names(CustomCategory, user)})


@vocabulary_bp.route("/categories", methods=["POST"])
def add_category():
    payload, status = _add_term(CustomCategory, DEFAULT_CATEGORIES, "category")
    return jsonify(payload), status


@vocabulary_bp.route("/sources", methods=["GET"])
def list_sources():
    user = require_user()
    return jsonify({"sources": list(DEFAULT_SOURCES) + _custom_names(CustomSource, user)})


@vocabulary_bp.route("/sources", methods=["POST"])
def add_source():
    payload, status = _add_term(CustomSource, DEFAULT_SOURCES, "source")
    return jsonify(payload), status
