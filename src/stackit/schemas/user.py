"""User-related Pydantic schemas."""
from __future__ import annotations

from datetime import datetime

from pydantic import Field

from .common import APIModel


class PublicUserResponse(APIModel):
    """Profile visible to anyone."""

    id: int
    name: str
    reputation: int
    created_at: datetime


class UserResponse(PublicUserResponse):
    """Profile of the authenticated caller."""

    email: str
    role: str


class UserUpdate(APIModel):
    """Editable profile fields."""

    name: str = Field(..., min_length=2, max_length=100)


class QuestionRef(APIModel):
    id: int
    title: str


class UserAnswerResponse(APIModel):
    """An answer listed on its author's profile."""

    id: int
    content: str = Field(..., validation_alias="body")
    score: int
    is_accepted: bool
    created_at: datetime
    question: QuestionRef
