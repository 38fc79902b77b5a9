from sqlalchemy import Column, BigInteger, Integer, String, DateTime, Enum, Text
from sqlalchemy.orm import relationship
from datetime import datetime, timezone
from lovculator.database import Base
import enum


def utcnow() -> datetime:
    # Naive UTC, matching DATETIME columns on MySQL
    return datetime.now(timezone.utc).replace(tzinfo=None)


class UserStatus(str, enum.Enum):
    active = "active"
    blocked = "blocked"


class User(Base):
    __tablename__ = "Users"

    # SQLite only autoincrements INTEGER PRIMARY KEY
    id = Column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, index=True, autoincrement=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    username = Column(String(50), unique=True, nullable=False, index=True)
    displayName = Column(String(255))
    avatarUrl = Column(String(500))
    bio = Column(Text)
    status = Column(Enum(UserStatus), nullable=False, default=UserStatus.active)
    createdAt = Column(DateTime, nullable=False, default=utcnow)

    # Following/Followers
    following = relationship(
        "Follow",
        foreign_keys="Follow.followerId",
        back_populates="follower",
        cascade="all, delete-orphan",
        passive_deletes=True
    )
    followers = relationship(
        "Follow",
        foreign_keys="Follow.targetId",
        back_populates="target",
        cascade="all, delete-orphan",
        passive_deletes=True
    )
