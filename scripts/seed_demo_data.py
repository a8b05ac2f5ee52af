"""Seed demo users, a shared group, and saved links."""

from __future__ import annotations

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from app import create_app
from models import db
from models.group import Group, GroupMember
from models.link import Link
from models.user import User

OWNER_EMAIL = "owner@example.com"
MEMBER_EMAIL = "member@example.com"
DEMO_PASSWORD = "DemoPass#123"
GROUP_NAME = "Reading List"

LINKS_DATA = [
    {
        "url": "https://flask.palletsprojects.com/",
        "title": "Flask documentation",
        "source": "other",
        "category": "tech",
        "tags": "python,flask",
        "visibility": "public",
    },
    {
        "url": "https://www.youtube.com/watch?v=dQw4w9WgXcQ",
        "title": "Friday music",
        "source": "youtube",
        "category": "music",
        "visibility": "private",
    },
    {
        "url": "https://github.com/pallets/flask",
        "title": "Flask source",
        "source": "github",
        "category": "tech",
        "description": "Worth reading before the next refactor.",
        "visibility": "group",
        "in_group": True,
    },
]


def get_or_create_user(email: str, name: str, password: str) -> User:
    user = User.query.filter_by(email=email).first()
    if user is None:
        user = User(email=email, name=name)
        db.session.add(user)
    user.name = name
    user.is_verified = True
    user.set_password(password)
    return user


def seed_demo_data() -> dict[str, int]:
    """Insert or refresh the demo records and return their identifiers.

    Must run inside an application context. Running it twice leaves a
    single copy of every record.
    """

    owner = get_or_create_user(OWNER_EMAIL, "Demo Owner", DEMO_PASSWORD)
    member = get_or_create_user(MEMBER_EMAIL, "Demo Member", DEMO_PASSWORD)
    db.session.flush()

    group = Group.query.filter_by(owner_id=owner.id, name=GROUP_NAME).first()
    if group is None:
        group = Group(owner_id=owner.id, name=GROUP_NAME, description="Links worth sharing")
        db.session.add(group)
        db.session.flush()

    membership = GroupMember.query.filter_by(group_id=group.id, email=member.email).first()
    if membership is None:
        db.session.add(GroupMember(group_id=group.id, user_id=member.id, email=member.email))

    for data in LINKS_DATA:
        values = {key: value for key, value in data.items() if key != "in_group"}
        values["group_id"] = group.id if data.get("in_group") else None
        link = Link.query.filter_by(user_id=owner.id, url=data["url"]).first()
        if link is None:
            db.session.add(Link(user_id=owner.id, **values))
        else:
            for key, value in values.items():
                setattr(link, key, value)

    db.session.commit()
    return {"owner_id": owner.id, "member_id": member.id, "group_id": group.id}


def main() -> None:
    app = create_app()
    with app.app_context():
        records = seed_demo_data()
        print(f"Seed data inserted: {records}")


if __name__ == "__main__":
    main()
