"""Version 1 API endpoints."""

from .endpoints import (
    answers_router,
    questions_router,
    system_router,
    users_router,
)

__all__ = [
    "answers_router",
    "questions_router",
    "system_router",
    "users_router",
]
