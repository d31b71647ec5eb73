"""SQLAlchemy models for the StackIt application."""

from .answer import Answer
from .question import Question, Tag, question_tag
from .user import ROLE_ADMIN, ROLE_USER, User
from .vote import Vote

__all__ = [
    "Answer",
    "Question", "Tag", "question_tag",
    "User", "ROLE_ADMIN", "ROLE_USER",
    "Vote",
]
