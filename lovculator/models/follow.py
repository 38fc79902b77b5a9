from sqlalchemy import Column, BigInteger, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from lovculator.database import Base
from lovculator.models.user import utcnow


class Follow(Base):
    """Directed edge: ``followerId`` follows ``targetId``.

    The composite primary key is the uniqueness constraint on the ordered
    pair, so the relation is a set.
    """
    __tablename__ = "Follows"

    followerId = Column(BigInteger, ForeignKey("Users.id", ondelete="CASCADE"), primary_key=True, index=True)
    targetId = Column(BigInteger, ForeignKey("Users.id", ondelete="CASCADE"), primary_key=True, index=True)
    createdAt = Column(DateTime, nullable=False, default=utcnow)

    # Relationships
    follower = relationship("User", foreign_keys=[followerId], back_populates="following")
    target = relationship("User", foreign_keys=[targetId], back_populates="followers")
