"""
Group store: which Codeforces handles are tracked in which chat.

Backed by SQLAlchemy ORM. Uniqueness of groups and of handles within a group
is enforced by the database (primary key and unique constraint), so the
"insert if absent" operations below are safe under concurrent updates for the
same chat without any locking on our side.
"""

import enum
import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import List, Optional

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from .models import Base, Group, TrackedHandleRow

logger = logging.getLogger(__name__)


class StoreUnavailable(Exception):
    """The persistence layer failed (connectivity loss, bad schema, ...)."""

    def __init__(self, operation: str, group_id: Optional[int] = None):
        self.operation = operation
        self.group_id = group_id
        super().__init__(f"Store unavailable during {operation} (group {group_id})")


class GroupNotFound(LookupError):
    """An operation that needs an existing group was called for an unknown one."""


@dataclass(frozen=True)
class TrackedHandle:
    handle: str


@dataclass
class GroupRecord:
    group_id: int
    group_name: Optional[str]
    users: List[TrackedHandle] = field(default_factory=list)

    def has_handle(self, handle: str) -> bool:
        return any(u.handle == handle for u in self.users)


class AddResult(enum.Enum):
    CREATED = "created"
    ADDED = "added"
    ALREADY_TRACKED = "already_tracked"


class GroupStore:
    """Read/insert/update operations on group records, keyed by chat id."""

    def __init__(self, database_url: str, echo: bool = False):
        if not database_url:
            raise ValueError("database_url must not be empty.")

        self.engine = create_engine(database_url, echo=echo)
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

    @contextmanager
    def get_session(self, operation: str, group_id: Optional[int] = None) -> Session:
        """Get a database session that commits on success and maps driver errors to StoreUnavailable."""
        session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            logger.error(f"Database error during {operation} for group {group_id}: {e}")
            raise StoreUnavailable(operation, group_id) from e
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def init_db(self):
        """Create tables if they don't exist."""
        try:
            Base.metadata.create_all(bind=self.engine)
            logger.info("Database initialized successfully with ORM.")
        except SQLAlchemyError as e:
            logger.error(f"Error initializing database: {e}")
            raise StoreUnavailable("init_db") from e

    def dispose(self):
        self.engine.dispose()

    def find_by_group(self, group_id: int) -> Optional[GroupRecord]:
        with self.get_session("find_by_group", group_id) as session:
            group = session.get(Group, group_id)
            if group is None:
                return None
            return GroupRecord(
                group_id=group.group_id,
                group_name=group.group_name,
                users=[TrackedHandle(handle=row.handle) for row in group.users],
            )

    def create_group(self, group_id: int, group_name: Optional[str], initial_handle: str) -> bool:
        """
        Creates a group tracking a single handle.
        Returns False, changing nothing, if a record for this chat already exists.
        """
        with self.get_session("create_group", group_id) as session:
            session.add(Group(group_id=group_id, group_name=group_name))
            session.add(TrackedHandleRow(group_id=group_id, handle=initial_handle))
            try:
                session.flush()
            except IntegrityError:
                session.rollback()
                logger.info(f"Group {group_id} already exists, not creating it again.")
                return False

        logger.info(f"New group added: {group_name} ({group_id})")
        return True

    def append_handle(self, group_id: int, handle: str) -> bool:
        """
        Appends a handle to an existing group if it is not tracked there yet.
        Returns False if the handle was already present.
        """
        with self.get_session("append_handle", group_id) as session:
            if session.get(Group, group_id) is None:
                raise GroupNotFound(f"Group {group_id} does not exist.")

            session.add(TrackedHandleRow(group_id=group_id, handle=handle))
            try:
                session.flush()
            except IntegrityError:
                session.rollback()
                return False

        logger.info(f"Added handle {handle} to group {group_id}")
        return True

    def add_handle(self, group_id: int, group_name: Optional[str], handle: str) -> AddResult:
        """Tracks a handle in a chat, creating the chat's record on first use."""
        existing = self.find_by_group(group_id)
        if existing is None:
            if self.create_group(group_id, group_name, handle):
                return AddResult.CREATED
            # Lost a creation race with a concurrent /add for the same chat.
        elif existing.has_handle(handle):
            return AddResult.ALREADY_TRACKED

        if self.append_handle(group_id, handle):
            return AddResult.ADDED
        return AddResult.ALREADY_TRACKED
