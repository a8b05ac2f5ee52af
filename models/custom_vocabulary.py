"""Per-user additions to the default link categories and sources."""

from . import db, utcnow

DEFAULT_CATEGORIES = (
    "education",
    "music",
    "movies",
    "documents",
    "tech",
    "news",
    "social",
    "other",
)

DEFAULT_SOURCES = (
    "youtube",
    "facebook",
    "linkedin",
    "twitter",
    "instagram",
    "github",
    "medium",
    "reddit",
    "other",
)


class CustomCategory(db.Model):
    __tablename__ = "custom_categories"
    __table_args__ = (
        db.UniqueConstraint("user_id", "name", name="uq_custom_categories_user_id_name"),
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(
        db.Integer,
        db.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name = db.Column(db.String(100), nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "userId": self.user_id,
            "name": self.name,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }


class CustomSource(db.Model):
    __tablename__ = "custom_sources"
    __table_args__ = (
        db.UniqueConstraint("user_id", "name", name="uq_custom_sources_user_id_name"),
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(
        db.Integer,
        db.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name = db.Column(db.String(100), nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "userId": self.user_id,
            "name": self.name,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
