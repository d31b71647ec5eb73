"""SQLAlchemy model for answers."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Integer, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from stackit.db.session import Base

if TYPE_CHECKING:
    from .question import Question
    from .user import User
    from .vote import Vote


class Answer(Base):
    """An answer posted under a question.

    At most one answer per question has ``is_accepted`` set.
    """

    __tablename__ = "answers"
    __table_args__ = (
        Index("ix_answers_question_id", "question_id"),
        Index("ix_answers_author_id", "author_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    question_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("questions.id", ondelete="CASCADE"),
        nullable=False,
    )
    author_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    body: Mapped[str] = mapped_column(Text, nullable=False)

    score: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_accepted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    question: Mapped[Question] = relationship("Question", back_populates="answers")
    author: Mapped[User] = relationship("User")
    votes: Mapped[list[Vote]] = relationship(
        "Vote",
        cascade="all, delete-orphan",
        passive_deletes=True,
        primaryjoin="Answer.id == Vote.answer_id",
    )
