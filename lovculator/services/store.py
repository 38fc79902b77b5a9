"""
Statement-level access to the Relationship Store.

Every mutation here is a single INSERT or DELETE followed by a commit, so
a toggle never leaves partial effects behind.
"""
import logging
from contextlib import contextmanager
from typing import Iterator, Optional
from sqlalchemy import insert
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from lovculator.models.follow import Follow
from lovculator.models.user import User, utcnow
from lovculator.schemas.follow import Edge
from lovculator.services.exceptions import (
    ActorNotFoundError,
    FollowServiceError,
    StoreUnavailableError,
    TargetNotFoundError,
    UniquenessRaceError,
)

logger = logging.getLogger(__name__)

# Dialects with an insert-or-ignore primitive
NATIVE_CONFLICT_DIALECTS = frozenset({"sqlite", "postgresql", "mysql"})


@contextmanager
def store_errors(db: Session, message: str) -> Iterator[None]:
    """Turn driver failures into ``StoreUnavailableError(message)``."""
    try:
        yield
    except FollowServiceError:
        raise
    except SQLAlchemyError:
        logger.exception("Store failure: %s", message)
        db.rollback()
        raise StoreUnavailableError(message)


def user_exists(db: Session, user_id: int) -> bool:
    return db.query(User.id).filter(User.id == user_id).first() is not None


def edge_exists(db: Session, follower_id: int, target_id: int) -> bool:
    return db.query(Follow.followerId).filter(
        Follow.followerId == follower_id,
        Follow.targetId == target_id
    ).first() is not None


def get_edge(db: Session, follower_id: int, target_id: int) -> Optional[Edge]:
    follow = db.query(Follow).filter(
        Follow.followerId == follower_id,
        Follow.targetId == target_id
    ).first()
    if follow is None:
        return None
    return Edge(follower_id=follow.followerId, target_id=follow.targetId, created_at=follow.createdAt)


def _insert_ignore(dialect: str, values: dict):
    if dialect == "sqlite":
        return sqlite_insert(Follow.__table__).values(**values).on_conflict_do_nothing()
    if dialect == "postgresql":
        return postgresql_insert(Follow.__table__).values(**values).on_conflict_do_nothing()
    return insert(Follow.__table__).values(**values).prefix_with("IGNORE")


def _missing_user_error(db: Session, follower_id: int, target_id: int) -> FollowServiceError:
    if not user_exists(db, follower_id):
        logger.warning("Follow by user %s rejected: caller has no user row", follower_id)
        return ActorNotFoundError(follower_id)
    logger.warning("Follow of user %s rejected: target has no user row", target_id)
    return TargetNotFoundError(target_id)


def _reconcile_integrity_error(db: Session, follower_id: int, target_id: int, exc: IntegrityError):
    db.rollback()
    if edge_exists(db, follower_id, target_id):
        raise UniquenessRaceError(follower_id, target_id) from exc
    # No duplicate, so a foreign key failed
    raise _missing_user_error(db, follower_id, target_id) from exc


def insert_edge(db: Session, follower_id: int, target_id: int) -> bool:
    """Insert the edge ``(follower_id, target_id)``.

    Returns True when this call created the row and False when a concurrent
    request had already created it.  On dialects without insert-or-ignore
    the duplicate shows up as an ``IntegrityError``, which is reconciled
    against the table and raised as ``UniquenessRaceError``.

    Raises ``ActorNotFoundError`` or ``TargetNotFoundError`` when either
    user row is missing at insert time, whichever path was taken.
    """
    values = {"followerId": follower_id, "targetId": target_id, "createdAt": utcnow()}
    dialect = db.get_bind().dialect.name

    if dialect in NATIVE_CONFLICT_DIALECTS:
        try:
            result = db.execute(_insert_ignore(dialect, values))
            db.commit()
        except IntegrityError as exc:
            _reconcile_integrity_error(db, follower_id, target_id, exc)
        if result.rowcount == 1:
            return True
        if edge_exists(db, follower_id, target_id):
            return False
        # MySQL's INSERT IGNORE also skips rows that fail a foreign key
        raise _missing_user_error(db, follower_id, target_id)

    try:
        db.execute(insert(Follow.__table__).values(**values))
        db.commit()
    except IntegrityError as exc:
        _reconcile_integrity_error(db, follower_id, target_id, exc)
    return True


def delete_edge(db: Session, follower_id: int, target_id: int) -> int:
    deleted = db.query(Follow).filter(
        Follow.followerId == follower_id,
        Follow.targetId == target_id
    ).delete(synchronize_session=False)
    db.commit()
    return deleted
