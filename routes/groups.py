"""Groups blueprint: group CRUD, membership management and group links."""

from __future__ import annotations

from http import HTTPStatus

from flask import Blueprint, current_app, jsonify, request
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import joinedload
from werkzeug.exceptions import BadRequest, Forbidden, NotFound

from models import db
from models.group import (
    GROUP_DESCRIPTION_MAX_LENGTH,
    GROUP_NAME_MAX_LENGTH,
    Group,
    GroupMember,
)
from models.link import Link
from models.user import User
from utils.identity import require_user
from utils.request_validation import (
    is_valid_email,
    normalize_email,
    parse_id,
    parse_json_request,
)

groups_bp = Blueprint("groups", __name__)

DUPLICATE_GROUP_NAME = "You already have a group with this name"
DUPLICATE_MEMBER = "This user is already a member of the group"


def _clean_name(value) -> str:
    if not isinstance(value, str) or not value.strip():
        raise BadRequest("Group name is required")
    name = value.strip()
    if len(name) > GROUP_NAME_MAX_LENGTH:
        raise BadRequest(f"Group name must be {GROUP_NAME_MAX_LENGTH} characters or less")
    return name


def _clean_description(value) -> str | None:
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise BadRequest("Description must be a string")
    description = value.strip()
    if len(description) > GROUP_DESCRIPTION_MAX_LENGTH:
        raise BadRequest(
            f"Description must be {GROUP_DESCRIPTION_MAX_LENGTH} characters or less"
        )
    return description or None


def _get_owned_group(group_id: int, user: User, action: str) -> Group:
    """Return the group if ``user`` owns it; missing and foreign groups both raise 403."""

    group = Group.query.filter_by(id=group_id, owner_id=user.id).first()
    if group is None:
        raise Forbidden(f"Group not found or you don't have permission to {action} it")
    return group


def _get_readable_group(group_id: int, user: User) -> Group:
    group = db.session.get(Group, group_id)
    if group is None:
        raise NotFound("Group not found")
    if not group.can_read(user):
        raise Forbidden("You don't have access to this group")
    return group


def _commit_group() -> None:
    """Flush a group write, mapping the per-owner name constraint to a 400."""

    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise BadRequest(DUPLICATE_GROUP_NAME)


def _serialize_group(group: Group, user: User) -> dict:
    members = [member.to_dict() for member in group.members]
    link_count = Link.query.filter(Link.group_id == group.id).count()
    data = group.to_dict()
    data.update(
        {
            "isOwner": group.is_owner(user),
            "members": members,
            # The owner has no membership row but counts as a member.
            "memberCount": len(members) + 1,
            "linkCount": link_count,
        }
    )
    return data


@groups_bp.route("", methods=["GET"])
def list_groups():
    """Return groups the requester owns followed by groups they belong to."""

    user = require_user()
    owned = (
        Group.query.filter(Group.owner_id == user.id)
        .order_by(Group.created_at.desc(), Group.id.desc())
        .all()
    )
    joined = (
        Group.query.join(GroupMember, GroupMember.group_id == Group.id)
        .filter(GroupMember.email == user.email)
        .order_by(Group.created_at.desc(), Group.id.desc())
        .all()
    )

    seen: set[int] = set()
    groups = []
    for group in owned + joined:
        if group.id in seen:
            continue
        seen.add(group.id)
        groups.append(_serialize_group(group, user))

    return jsonify({"groups": groups})


@groups_bp.route("", methods=["POST"])
def create_group():
    user = require_user()
    data = parse_json_request(request)

    group = Group(
        owner_id=user.id,
        name=_clean_name(data.get("name")),
        description=_clean_description(data.get("description")),
    )
    db.session.add(group)
    _commit_group()

    return (
        jsonify({"message": "Group created successfully", "group": group.to_dict()}),
        HTTPStatus.CREATED,
    )


@groups_bp.route("", methods=["PUT"])
def update_group():
    """Rename or re-describe a group; omitted fields keep their values."""

    user = require_user()
    data = parse_json_request(request)
    group_id = parse_id(data.get("id"), "Group ID")

    name = data.get("name")
    new_name = _clean_name(name) if name not in (None, "") else None
    description_given = "description" in data
    new_description = _clean_description(data.get("description"))

    group = _get_owned_group(group_id, user, "update")
    if new_name is not None:
        group.name = new_name
    if description_given:
        group.description = new_description
    _commit_group()

    return jsonify({"message": "Group updated successfully", "group": group.to_dict()})


@groups_bp.route("", methods=["DELETE"])
def delete_group():
    """Delete a group along with its memberships and group-scoped links."""

    user = require_user()
    group_id = parse_id(request.args.get("id"), "Group ID")
    group = _get_owned_group(group_id, user, "delete")

    db.session.delete(group)
    db.session.commit()
    return jsonify({"message": "Group deleted successfully"})


@groups_bp.route("/members", methods=["GET"])
def list_members():
    user = require_user()
    group = _get_readable_group(parse_id(request.args.get("groupId"), "Group ID"), user)

    members = (
        GroupMember.query.options(joinedload(GroupMember.user))
        .filter(GroupMember.group_id == group.id)
        .order_by(GroupMember.added_at, GroupMember.id)
        .all()
    )
    owner = group.owner
    return jsonify(
        {
            "members": [member.to_dict(include_name=True) for member in members],
            "owner": {"id": owner.id, "email": owner.email, "name": owner.name},
            "groupName": group.name,
        }
    )


@groups_bp.route("/members", methods=["POST"])
def add_member():
    """Add a registered user to a group by email. Owner only."""

    user = require_user()
    data = parse_json_request(request)
    if not data.get("groupId") or not data.get("email"):
        raise BadRequest("Group ID and email are required")

    group_id = parse_id(data.get("groupId"), "Group ID")
    email = normalize_email(data.get("email"))
    if not is_valid_email(email):
        raise BadRequest("Invalid email format")

    group = Group.query.filter_by(id=group_id, owner_id=user.id).first()
    if group is None:
        raise Forbidden("Group not found or you don't have permission")

    target = User.query.filter(db.func.lower(User.email) == email).first()
    if target is None:
        raise NotFound("No user found with this email address")
    if target.id == user.id:
        raise BadRequest("You are already the owner of this group")

    if GroupMember.query.filter_by(group_id=group.id, email=email).first() is not None:
        raise BadRequest(DUPLICATE_MEMBER)

    max_members = int(current_app.config.get("MAX_GROUP_MEMBERS", 50))
    if GroupMember.query.filter_by(group_id=group.id).count() >= max_members:
        raise BadRequest(f"Group has reached maximum capacity of {max_members} members")

    member = GroupMember(group_id=group.id, user_id=target.id, email=email)
    db.session.add(member)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise BadRequest(DUPLICATE_MEMBER)

    return (
        jsonify({"message": "Member added successfully", "member": member.to_dict(include_name=True)}),
        HTTPStatus.CREATED,
    )


@groups_bp.route("/members", methods=["DELETE"])
def remove_member():
    user = require_user()
    member_id = parse_id(request.args.get("memberId"), "Member ID")
    group_id = parse_id(request.args.get("groupId"), "Group ID")

    group = Group.query.filter_by(id=group_id, owner_id=user.id).first()
    if group is None:
        raise Forbidden("Group not found or you don't have permission")

    member = GroupMember.query.filter_by(id=member_id, group_id=group.id).first()
    if member is None:
        raise NotFound("Member not found in this group")

    db.session.delete(member)
    db.session.commit()
    return jsonify({"message": "Member removed successfully"})


@groups_bp.route("/links", methods=["GET"])
def list_group_links():
    """Return links filed under a group to its owner and members."""

    user = require_user()
    group = _get_readable_group(parse_id(request.args.get("groupId"), "Group ID"), user)

    links = (
        Link.query.options(joinedload(Link.owner))
        .filter(Link.group_id == group.id)
        .order_by(Link.created_at.desc(), Link.id.desc())
        .all()
    )
    return jsonify(
        {
            "links": [link.to_dict(include_owner=True) for link in links],
            "groupName": group.name,
        }
    )
