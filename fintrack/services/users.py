# services/users.py
"""Profile records for authenticated users."""

import logging
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from .. import models
from ..schemas import finance as schemas

logger = logging.getLogger(__name__)


def get_or_create_profile(
    db: Session,
    user_id: str,
    email: Optional[str] = None,
    name: Optional[str] = None,
) -> models.User:
    """Return the profile for a token subject, creating it from token claims on first sight."""
    user = db.query(models.User).filter(models.User.id == user_id).first()
    if user:
        return user

    logger.info(f"Provisioning profile for user {user_id}")
    user = models.User(id=user_id, email=email, name=name or (email.split("@")[0] if email else None))
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def update_profile(db: Session, user: models.User, data: schemas.UserUpdate) -> models.User:
    logger.info(f"Updating profile {user.id}")
    if data.name is not None:
        user.name = data.name
    if data.email is not None:
        user.email = data.email.lower()
        user.is_verified = False

    db.commit()
    db.refresh(user)
    return user


def get_stats(db: Session, user_id: str) -> dict:
    def count(model) -> int:
        return db.query(func.count(model.id)).filter(model.user_id == user_id).scalar() or 0

    return {
        "transaction_count": count(models.Transaction),
        "category_count": count(models.Category),
        "budget_count": count(models.Budget),
    }
