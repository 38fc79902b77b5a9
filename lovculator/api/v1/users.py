from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from lovculator.database import get_db
from lovculator.core.security import IdentityContext
from lovculator.schemas.user import ProfileSummary, UserProfile
from lovculator.services import relationship_service
from lovculator.api.deps import get_identity

router = APIRouter()


@router.get("/{user_id}", response_model=UserProfile)
def get_user(
    user_id: int,
    identity: IdentityContext = Depends(get_identity),
    db: Session = Depends(get_db)
):
    return relationship_service.get_profile(db, user_id, viewer_id=identity.user_id)


@router.get("/{user_id}/followers", response_model=List[ProfileSummary])
def get_user_followers(
    user_id: int,
    identity: IdentityContext = Depends(get_identity),
    db: Session = Depends(get_db)
):
    return relationship_service.list_followers(db, user_id, viewer_id=identity.user_id)


@router.get("/{user_id}/following", response_model=List[ProfileSummary])
def get_user_following(
    user_id: int,
    identity: IdentityContext = Depends(get_identity),
    db: Session = Depends(get_db)
):
    return relationship_service.list_following(db, user_id, viewer_id=identity.user_id)
