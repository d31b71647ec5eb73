"""Question-related Pydantic schemas."""
from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import Field, field_validator

from .common import APIModel, AuthorSummary, Pagination
from .vote import UserVote

QuestionSort = Literal["newest", "oldest", "votes", "answers", "views"]
QuestionFilter = Literal["all", "unanswered", "solved"]

MAX_TAGS = 5


def _clean_tags(tags: list[str]) -> list[str]:
    cleaned: list[str] = []
    for tag in tags:
        name = tag.strip().lower()
        if not 2 <= len(name) <= 20:
            raise ValueError("Each tag must be between 2 and 20 characters")
        if name not in cleaned:
            cleaned.append(name)
    return cleaned


class QuestionCreate(APIModel):
    """Schema for asking a new question."""

    title: str = Field(..., min_length=10, max_length=150)
    description: str = Field(..., min_length=20)
    tags: list[str] = Field(..., min_length=1, max_length=MAX_TAGS)

    @field_validator("tags")
    @classmethod
    def _validate_tags(cls, tags: list[str]) -> list[str]:
        return _clean_tags(tags)


class QuestionUpdate(APIModel):
    """Partial update of a question; omitted fields are left unchanged."""

    title: str | None = Field(None, min_length=10, max_length=150)
    description: str | None = Field(None, min_length=20)
    tags: list[str] | None = Field(None, min_length=1, max_length=MAX_TAGS)

    @field_validator("tags")
    @classmethod
    def _validate_tags(cls, tags: list[str] | None) -> list[str] | None:
        if tags is None:
            return None
        return _clean_tags(tags)


class QuestionResponse(APIModel):
    """Question as returned by the API."""

    id: int
    title: str
    description: str
    tags: list[str] = Field(default_factory=list, validation_alias="tag_names")
    author: AuthorSummary
    score: int
    answer_count: int
    view_count: int
    has_accepted_answer: bool
    created_at: datetime
    updated_at: datetime
    user_vote: UserVote | None = None


class QuestionListResponse(APIModel):
    """One page of questions."""

    questions: list[QuestionResponse]
    pagination: Pagination


class QuestionCreated(APIModel):
    """Identifier of a newly created question."""

    message: str = "Question created successfully"
    question_id: int
