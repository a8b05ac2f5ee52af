"""Link model."""

from . import db, utcnow

LINK_VISIBILITIES = ("private", "public", "group")
TITLE_MAX_LENGTH = 255


class Link(db.Model):
    """A saved URL with classification metadata, owned by a single user."""

    __tablename__ = "links"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(
        db.Integer,
        db.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    url = db.Column(db.Text, nullable=False)
    title = db.Column(db.String(TITLE_MAX_LENGTH), nullable=True)
    source = db.Column(db.String(100), nullable=False)
    category = db.Column(db.String(100), nullable=False)
    tags = db.Column(db.Text, nullable=True)
    description = db.Column(db.Text, nullable=True)
    visibility = db.Column(
        db.Enum(*LINK_VISIBILITIES, name="link_visibility_enum"),
        nullable=False,
        default="private",
        server_default=db.text("'private'"),
        index=True,
    )
    group_id = db.Column(
        db.Integer,
        db.ForeignKey("groups.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    owner = db.relationship("User", back_populates="links")
    group = db.relationship("Group", back_populates="links")

    def to_dict(self, include_owner: bool = False) -> dict:
        """Serialize the link to a dictionary."""

        data = {
            "id": self.id,
            "userId": self.user_id,
            "url": self.url,
            "title": self.title,
            "source": self.source,
            "category": self.category,
            "tags": self.tags,
            "description": self.description,
            "visibility": self.visibility,
            "groupId": self.group_id,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }
        if include_owner:
            data["userName"] = self.owner.name if self.owner is not None else None
        return data
