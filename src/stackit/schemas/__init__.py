"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .answer import AcceptanceResponse, AnswerCreate, AnswerResponse, AnswerUpdate
from .question import QuestionCreate, QuestionListResponse, QuestionResponse, QuestionUpdate
from .user import PublicUserResponse, UserResponse, UserUpdate
from .vote import MyVoteResponse, VoteRequest, VoteResponse

__all__ = [
    "AcceptanceResponse", "AnswerCreate", "AnswerResponse", "AnswerUpdate",
    "QuestionCreate", "QuestionListResponse", "QuestionResponse", "QuestionUpdate",
    "PublicUserResponse", "UserResponse", "UserUpdate",
    "MyVoteResponse", "VoteRequest", "VoteResponse",
]
