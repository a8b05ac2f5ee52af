"""Tests for the demo data seeding script."""

from models.group import Group, GroupMember
from models.link import Link
from models.user import User
from scripts.seed_demo_data import DEMO_PASSWORD, OWNER_EMAIL, seed_demo_data


def test_seed_is_idempotent(app):
    with app.app_context():
        first = seed_demo_data()
        second = seed_demo_data()

        assert first == second
        assert User.query.count() == 2
        assert Group.query.count() == 1
        assert GroupMember.query.count() == 1
        assert Link.query.count() == 3
        assert Link.query.filter(Link.group_id == first["group_id"]).count() == 1


def test_seeded_owner_can_sign_in(app, client):
    with app.app_context():
        seed_demo_data()
        assert User.query.filter_by(email=OWNER_EMAIL).one().is_verified is True

    response = client.post("/api/login", json={"email": OWNER_EMAIL, "password": DEMO_PASSWORD})

    assert response.status_code == 200
    assert response.get_json()["access_token"]
