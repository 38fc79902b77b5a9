"""
Follow toggle: the one operation that mutates the follow graph.

``toggle_follow`` flips the existence of the directed edge between the
caller and a target.  It is a check-then-act sequence; concurrent
duplicate follows are made safe by ``store.insert_edge``, which never
creates a second row and reports the duplicate instead of failing.
"""
import logging
from sqlalchemy.orm import Session
from lovculator.core.security import IdentityContext
from lovculator.schemas.follow import ToggleResult, FollowStatus
from lovculator.services import store
from lovculator.services.exceptions import (
    SelfReferenceError,
    TargetNotFoundError,
    UniquenessRaceError,
)

logger = logging.getLogger(__name__)


def toggle_follow(db: Session, identity: IdentityContext, target_id: int) -> ToggleResult:
    """Follow ``target_id`` if the caller does not already, otherwise unfollow.

    Raises
    ------
    UnauthenticatedError
        The identity context is anonymous.
    SelfReferenceError
        The caller tried to follow themselves.  Checked before any store access.
    TargetNotFoundError
        Following a user that does not exist.
    StoreUnavailableError
        The store could not be reached or the statement failed.
    """
    actor_id = identity.require_user_id()
    if actor_id == target_id:
        raise SelfReferenceError()

    with store.store_errors(db, "Follow action failed"):
        if store.edge_exists(db, actor_id, target_id):
            store.delete_edge(db, actor_id, target_id)
            logger.info("User %s unfollowed user %s", actor_id, target_id)
            return ToggleResult(following=False)

        if not store.user_exists(db, target_id):
            raise TargetNotFoundError(target_id)

        try:
            inserted = store.insert_edge(db, actor_id, target_id)
        except UniquenessRaceError:
            inserted = False

        if inserted:
            logger.info("User %s followed user %s", actor_id, target_id)
        else:
            logger.warning(
                "Concurrent follow of user %s by user %s; treating as already following",
                target_id, actor_id
            )
        return ToggleResult(following=True)


def follow_status(db: Session, identity: IdentityContext, target_id: int) -> FollowStatus:
    # Anonymous callers follow nobody
    if not identity.is_authenticated:
        return FollowStatus(is_following=False)

    with store.store_errors(db, "Failed to check follow status"):
        edge = store.get_edge(db, identity.user_id, target_id)

    if edge is None:
        return FollowStatus(is_following=False)
    return FollowStatus(is_following=True, followed_at=edge.created_at)
