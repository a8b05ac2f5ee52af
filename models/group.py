"""Group and group membership models."""

from . import db, utcnow


GROUP_NAME_MAX_LENGTH = 50
GROUP_DESCRIPTION_MAX_LENGTH = 200


class Group(db.Model):
    """A named collection of links shared by its owner with members."""

    __tablename__ = "groups"
    __table_args__ = (
        db.UniqueConstraint("owner_id", "name", name="uq_groups_owner_id_name"),
    )

    id = db.Column(db.Integer, primary_key=True)
    owner_id = db.Column(
        db.Integer,
        db.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name = db.Column(db.String(GROUP_NAME_MAX_LENGTH), nullable=False)
    description = db.Column(db.String(GROUP_DESCRIPTION_MAX_LENGTH), nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    owner = db.relationship("User", back_populates="owned_groups")
    members = db.relationship(
        "GroupMember",
        back_populates="group",
        cascade="all, delete-orphan",
        order_by="GroupMember.added_at",
    )
    links = db.relationship(
        "Link",
        back_populates="group",
        cascade="all, delete-orphan",
    )

    def is_owner(self, user) -> bool:
        return user is not None and user.id == self.owner_id

    def has_member(self, email: str) -> bool:
        """Return True if ``email`` holds a membership row in this group."""

        normalized = (email or "").lower()
        return any(member.email == normalized for member in self.members)

    def can_read(self, user) -> bool:
        """Owners and members may read a group; nobody else can."""

        if user is None:
            return False
        return self.is_owner(user) or self.has_member(user.email)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "ownerId": self.owner_id,
            "name": self.name,
            "description": self.description,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        return f"<Group id={self.id} owner_id={self.owner_id} name={self.name!r}>"


class GroupMember(db.Model):
    """Grants a registered user, keyed by email, read access to a group.

    The group owner never has a membership row; ownership is implicit.
    """

    __tablename__ = "group_members"
    __table_args__ = (
        db.UniqueConstraint("group_id", "email", name="uq_group_members_group_id_email"),
    )

    id = db.Column(db.Integer, primary_key=True)
    group_id = db.Column(
        db.Integer,
        db.ForeignKey("groups.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id = db.Column(
        db.Integer,
        db.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    email = db.Column(db.String(255), nullable=False, index=True)
    added_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    group = db.relationship("Group", back_populates="members")
    user = db.relationship("User", back_populates="memberships")

    def to_dict(self, include_name: bool = False) -> dict:
        data = {
            "id": self.id,
            "groupId": self.group_id,
            "userId": self.user_id,
            "email": self.email,
            "addedAt": self.added_at.isoformat() if self.added_at else None,
        }
        if include_name:
            data["name"] = self.user.name if self.user is not None else None
        return data
