"""
Read views over the follow graph.

Followers and following lists are enriched with display attributes from
``Users`` and ordered case-insensitively by display name (username when
the display name is empty), ties broken by id.  Suggestions are random;
only their exclusion set and size are guaranteed.

``viewer_id`` is whoever is looking at the list.  Each summary's
``is_following`` says whether the viewer follows that user; an anonymous
viewer (None) follows nobody.
"""
from typing import List, Optional
from sqlalchemy import exists, func, literal, select
from sqlalchemy.orm import Session, aliased
from lovculator.models.follow import Follow
from lovculator.models.user import User, UserStatus
from lovculator.schemas.follow import FollowCounts
from lovculator.schemas.user import ProfileSummary, UserProfile
from lovculator.services import store
from lovculator.services.exceptions import TargetNotFoundError


def _display_order():
    return (
        func.lower(func.coalesce(func.nullif(User.displayName, ""), User.username)),
        User.id,
    )


def _viewer_follows(viewer_id: Optional[int]):
    if viewer_id is None:
        return literal(False)
    viewer_edge = aliased(Follow)
    return exists().where(
        viewer_edge.followerId == viewer_id,
        viewer_edge.targetId == User.id
    )


def _random_order(db: Session):
    if db.get_bind().dialect.name == "mysql":
        return func.rand()
    return func.random()


def to_summary(user: User, is_following: bool) -> ProfileSummary:
    return ProfileSummary(
        id=user.id,
        username=user.username,
        display_name=user.displayName,
        avatar_url=user.avatarUrl,
        bio=user.bio,
        is_following=bool(is_following),
    )


def list_followers(db: Session, user_id: int, viewer_id: Optional[int] = None) -> List[ProfileSummary]:
    """Users ``u`` with an edge ``(u, user_id)``."""
    with store.store_errors(db, "Failed to load followers"):
        rows = db.query(User, _viewer_follows(viewer_id).label("is_following")).join(
            Follow, Follow.followerId == User.id
        ).filter(
            Follow.targetId == user_id
        ).order_by(*_display_order()).all()

    return [to_summary(user, flag) for user, flag in rows]


def list_following(db: Session, user_id: int, viewer_id: Optional[int] = None) -> List[ProfileSummary]:
    """Users ``u`` with an edge ``(user_id, u)``."""
    with store.store_errors(db, "Failed to load following list"):
        rows = db.query(User, _viewer_follows(viewer_id).label("is_following")).join(
            Follow, Follow.targetId == User.id
        ).filter(
            Follow.followerId == user_id
        ).order_by(*_display_order()).all()

    return [to_summary(user, flag) for user, flag in rows]


def suggest_similar(db: Session, user_id: int, limit: int) -> List[ProfileSummary]:
    """Up to ``limit`` active users that ``user_id`` neither is nor follows."""
    if limit <= 0:
        return []

    already_following = select(Follow.targetId).where(Follow.followerId == user_id)

    with store.store_errors(db, "Failed to load suggestions"):
        users = db.query(User).filter(
            User.id != user_id,
            User.id.not_in(already_following),
            User.status == UserStatus.active
        ).order_by(_random_order(db)).limit(limit).all()

    return [to_summary(user, False) for user in users]


def follow_counts(db: Session, user_id: int) -> FollowCounts:
    with store.store_errors(db, "Failed to load follow counts"):
        follower_count = db.query(func.count()).select_from(Follow).filter(
            Follow.targetId == user_id
        ).scalar()
        following_count = db.query(func.count()).select_from(Follow).filter(
            Follow.followerId == user_id
        ).scalar()

    return FollowCounts(
        user_id=user_id,
        follower_count=follower_count or 0,
        following_count=following_count or 0,
    )


def get_profile(db: Session, user_id: int, viewer_id: Optional[int] = None) -> UserProfile:
    with store.store_errors(db, "Failed to load profile"):
        row = db.query(User, _viewer_follows(viewer_id).label("is_following")).filter(
            User.id == user_id
        ).first()
    if row is None:
        raise TargetNotFoundError(user_id)

    user, is_following = row
    counts = follow_counts(db, user_id)
    return UserProfile(
        **to_summary(user, is_following).model_dump(),
        follower_count=counts.follower_count,
        following_count=counts.following_count,
        created_at=user.createdAt,
    )
