"""SQLAlchemy models for questions and their tags."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
    Text,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from stackit.db.session import Base

if TYPE_CHECKING:
    from .answer import Answer
    from .user import User
    from .vote import Vote


question_tag = Table(
    "question_tags",
    Base.metadata,
    Column("question_id", Integer, ForeignKey("questions.id", ondelete="CASCADE"), primary_key=True),
    Column("tag_id", Integer, ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True),
)


class Tag(Base):
    """Free-form label attached to questions by name."""

    __tablename__ = "tags"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(20), unique=True, nullable=False)


class Question(Base):
    """A question asked by a user.

    ``score`` is the denormalized net vote total kept in step with the vote
    ledger; ``has_accepted_answer`` mirrors whether any of its answers is
    accepted.
    """

    __tablename__ = "questions"
    __table_args__ = (
        Index("ix_questions_author_id", "author_id"),
        Index("ix_questions_created_at", "created_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    author_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    title: Mapped[str] = mapped_column(String(150), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)

    score: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    answer_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    view_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    has_accepted_answer: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

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

    author: Mapped[User] = relationship("User")
    tags: Mapped[list[Tag]] = relationship(
        "Tag",
        secondary=question_tag,
        order_by="Tag.name",
    )
    answers: Mapped[list[Answer]] = relationship(
        "Answer",
        back_populates="question",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    votes: Mapped[list[Vote]] = relationship(
        "Vote",
        cascade="all, delete-orphan",
        passive_deletes=True,
        primaryjoin="Question.id == Vote.question_id",
    )

    @property
    def tag_names(self) -> list[str]:
        """Return the names of the attached tags."""
        return [tag.name for tag in self.tags]
