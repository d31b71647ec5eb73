"""Answer-related Pydantic schemas."""
from __future__ import annotations

from datetime import datetime

from pydantic import Field

from .common import APIModel, AuthorSummary
from .vote import UserVote


class AnswerCreate(APIModel):
    """Schema for posting an answer."""

    question_id: int = Field(..., ge=1)
    content: str = Field(..., min_length=10)


class AnswerUpdate(APIModel):
    """Schema for editing an answer."""

    content: str = Field(..., min_length=10)


class AnswerResponse(APIModel):
    """Answer as returned by the API."""

    id: int
    question_id: int
    content: str = Field(..., validation_alias="body")
    author: AuthorSummary
    score: int
    is_accepted: bool
    created_at: datetime
    updated_at: datetime
    user_vote: UserVote | None = None


class AnswerCreated(APIModel):
    """Identifier of a newly created answer."""

    message: str = "Answer created successfully"
    answer_id: int


class AcceptanceResponse(APIModel):
    """Acceptance state of a question after an accept/unaccept."""

    question_id: int
    accepted_answer_id: int | None
    has_accepted_answer: bool
