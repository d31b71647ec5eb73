"""Vote-related Pydantic schemas."""
from __future__ import annotations

from typing import Literal

from pydantic import Field

from .common import APIModel

UserVote = Literal["up", "down"]


class VoteRequest(APIModel):
    """Schema for casting a vote on a question or answer."""

    vote_type: str = Field(..., description="'up' or 'down'; repeating a direction retracts it")


class VoteResponse(APIModel):
    """New vote state after a cast."""

    target: Literal["question", "answer"]
    id: int
    user_vote: UserVote | None = Field(None, description="Caller's vote after the cast")
    delta: int = Field(..., description="Change applied to the target's score")
    score: int = Field(..., description="Target's score after the cast")


class MyVoteResponse(APIModel):
    """Caller's current vote on a target."""

    user_vote: UserVote | None = None
