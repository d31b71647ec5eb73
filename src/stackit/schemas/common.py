"""Shared Pydantic schemas for common API elements."""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class APIModel(BaseModel):
    """Base model speaking camelCase on the wire and snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class Pagination(APIModel):
    """Page metadata returned by list endpoints."""

    page: int = Field(..., ge=1)
    limit: int = Field(..., ge=1)
    total: int = Field(..., ge=0)
    pages: int = Field(..., ge=0)


class AuthorSummary(APIModel):
    """Public view of the author of a question or answer."""

    id: int
    name: str
    reputation: int


class ErrorResponse(BaseModel):
    """Structured error body returned for every failure."""

    reason: str = Field(..., description="Machine-readable error code")
    detail: str = Field(..., description="Human-readable message")
