"""CRUD-style helpers for user profiles."""
from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from stackit.core.errors import NotFoundError
from stackit.models import Answer, User
from stackit.services.transaction import run_in_transaction

__all__ = [
    "get_user",
    "list_user_answers",
    "update_profile",
]


def get_user(db: Session, user_id: int) -> User:
    """Return a single user by primary key."""
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


def update_profile(db: Session, user: User, name: str) -> User:
    """Rename the user."""

    def _apply() -> User:
        user.name = name.strip()
        db.add(user)
        db.flush()
        return user

    run_in_transaction(db, _apply, action="update profile", user=user.id)
    db.refresh(user)
    return user


def list_user_answers(
    db: Session,
    user: User,
    *,
    page: int = 1,
    limit: int = 10,
) -> Sequence[Answer]:
    """Return the user's answers, newest first, with their questions loaded."""
    return db.scalars(
        select(Answer)
        .where(Answer.author_id == user.id)
        .options(selectinload(Answer.question))
        .order_by(Answer.created_at.desc(), Answer.id.desc())
        .limit(limit)
        .offset((page - 1) * limit)
    ).all()
