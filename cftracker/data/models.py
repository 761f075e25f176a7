"""SQLAlchemy models for the database."""

from datetime import datetime
from sqlalchemy import Column, Integer, BigInteger, String, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()


class Group(Base):
    """A tracked chat. The chat id is the primary key, so one row per chat."""
    __tablename__ = 'groups'

    group_id = Column(BigInteger, primary_key=True, autoincrement=False)
    group_name = Column(String)
    created_at = Column(DateTime, default=datetime.utcnow)

    users = relationship(
        "TrackedHandleRow",
        back_populates="group",
        order_by="TrackedHandleRow.id",
        lazy="selectin",
    )

    def __repr__(self):
        return f"<Group(group_id={self.group_id}, group_name='{self.group_name}')>"


class TrackedHandleRow(Base):
    """A Codeforces handle tracked in a group, kept in insertion order."""
    __tablename__ = 'tracked_handles'

    id = Column(Integer, primary_key=True, autoincrement=True)
    group_id = Column(BigInteger, ForeignKey('groups.group_id'), nullable=False, index=True)
    handle = Column(String, nullable=False)
    added_at = Column(DateTime, default=datetime.utcnow)

    group = relationship("Group", back_populates="users")

    # Case-sensitive: "Tourist" and "tourist" are different entries.
    __table_args__ = (
        UniqueConstraint('group_id', 'handle', name='uq_tracked_handles_group_handle'),
    )

    def __repr__(self):
        return f"<TrackedHandleRow(group_id={self.group_id}, handle='{self.handle}')>"
