from datetime import datetime, timezone

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    event,
)
from sqlalchemy.orm import declarative_base, relationship

from microposts.validation import MAX_CONTENT_LENGTH, InvalidPostError, validate_post

Base = declarative_base()


def _utcnow():
    """Return current UTC time as a naive datetime (SQLite doesn't store tz info)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class User(Base):
    __tablename__ = "users"

    id = Column(String(64), primary_key=True)
    name = Column(String, nullable=True)
    created_at = Column(DateTime, default=_utcnow)

    microposts = relationship(
        "Micropost",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


class Micropost(Base):
    __tablename__ = "microposts"
    __table_args__ = (
        # Bulk updates and Core inserts skip the mapper guard below
        CheckConstraint(
            f"length(content) BETWEEN 1 AND {MAX_CONTENT_LENGTH}",
            name="content_length",
        ),
        CheckConstraint("user_id <> ''", name="user_id_present"),
    )

    id = Column(Integer, primary_key=True)
    created_at = Column(DateTime, default=_utcnow, index=True)
    content = Column(Text, nullable=False)
    user_id = Column(
        String(64),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    user = relationship("User", back_populates="microposts")

    def to_dict(self):
        return {
            "id": self.id,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "content": self.content,
            "user_id": self.user_id,
        }


@event.listens_for(Micropost, "before_insert")
@event.listens_for(Micropost, "before_update")
def _guard_micropost(mapper, connection, target):
    # user_id may only be known through the relationship at flush time
    if target.user_id is None and target.user is not None:
        target.user_id = target.user.id
    violations = validate_post(target)
    if violations:
        raise InvalidPostError(violations)
