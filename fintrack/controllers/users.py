# controllers/users.py
from typing import Optional
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..auth import get_current_user, get_token_claims
from ..dependencies import get_db
from ..schemas import finance as schemas
from ..services import users as service

router = APIRouter()


def get_profile(
    db: Session = Depends(get_db),
    current_user: str = Depends(get_current_user),
    claims: dict = Depends(get_token_claims)
):
    email: Optional[str] = claims.get("email")
    return service.get_or_create_profile(
        db, current_user, email.lower() if email else None, claims.get("name")
    )


@router.get("/me", response_model=schemas.UserProfile, summary="Get my profile")
def read_profile(profile=Depends(get_profile)):
    """Returns the caller's profile, creating it from token claims on first access."""
    return profile


@router.patch("/me", response_model=schemas.UserProfile, summary="Update my profile")
def update_profile(
    data: schemas.UserUpdate,
    db: Session = Depends(get_db),
    profile=Depends(get_profile)
):
    return service.update_profile(db, profile, data)


@router.get("/stats", response_model=schemas.UserStats, summary="Record counts")
def read_stats(
    db: Session = Depends(get_db),
    current_user: str = Depends(get_current_user)
):
    return service.get_stats(db, current_user)
