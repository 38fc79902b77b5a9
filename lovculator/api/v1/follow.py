from typing import List
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from lovculator.database import get_db
from lovculator.core.config import settings
from lovculator.core.security import IdentityContext
from lovculator.schemas.follow import ToggleResult, FollowStatus, FollowCounts
from lovculator.schemas.user import ProfileSummary
from lovculator.services import follow_service, relationship_service
from lovculator.api.deps import get_identity

router = APIRouter()


@router.post("/toggle/{target_id}", response_model=ToggleResult)
def toggle_follow(
    target_id: int,
    identity: IdentityContext = Depends(get_identity),
    db: Session = Depends(get_db)
):
    return follow_service.toggle_follow(db, identity, target_id)


# People who follow ME
@router.get("/followers", response_model=List[ProfileSummary])
def get_my_followers(
    identity: IdentityContext = Depends(get_identity),
    db: Session = Depends(get_db)
):
    user_id = identity.require_user_id()
    return relationship_service.list_followers(db, user_id, viewer_id=user_id)


# People I follow
@router.get("/following", response_model=List[ProfileSummary])
def get_my_following(
    identity: IdentityContext = Depends(get_identity),
    db: Session = Depends(get_db)
):
    user_id = identity.require_user_id()
    return relationship_service.list_following(db, user_id, viewer_id=user_id)


@router.get("/suggestions", response_model=List[ProfileSummary])
def get_suggestions(
    limit: int = Query(settings.SUGGESTION_LIMIT, ge=0, le=settings.MAX_SUGGESTION_LIMIT),
    identity: IdentityContext = Depends(get_identity),
    db: Session = Depends(get_db)
):
    user_id = identity.require_user_id()
    return relationship_service.suggest_similar(db, user_id, limit)


@router.get("/status/{target_id}", response_model=FollowStatus)
def get_follow_status(
    target_id: int,
    identity: IdentityContext = Depends(get_identity),
    db: Session = Depends(get_db)
):
    return follow_service.follow_status(db, identity, target_id)


@router.get("/counts/{user_id}", response_model=FollowCounts)
def get_follow_counts(user_id: int, db: Session = Depends(get_db)):
    return relationship_service.follow_counts(db, user_id)
