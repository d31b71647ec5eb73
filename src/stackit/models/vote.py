"""Vote ledger model: one row per (voter, target)."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    SmallInteger,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column

from stackit.db.session import Base


class Vote(Base):
    """A voter's current direction on a question or an answer.

    A row references exactly one target. The unique constraints make the
    ledger hold at most one vote per (voter, target) pair, so a duplicate
    concurrent insert fails instead of double-counting.
    """

    __tablename__ = "votes"
    __table_args__ = (
        CheckConstraint("direction IN (1, -1)", name="ck_votes_direction"),
        CheckConstraint(
            "(question_id IS NULL) <> (answer_id IS NULL)",
            name="ck_votes_single_target",
        ),
        UniqueConstraint("voter_id", "question_id", name="uq_votes_voter_question"),
        UniqueConstraint("voter_id", "answer_id", name="uq_votes_voter_answer"),
        Index("ix_votes_question_id", "question_id"),
        Index("ix_votes_answer_id", "answer_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    voter_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    question_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("questions.id", ondelete="CASCADE"),
        nullable=True,
    )
    answer_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("answers.id", ondelete="CASCADE"),
        nullable=True,
    )

    # 1 = upvote, -1 = downvote.
    direction: Mapped[int] = mapped_column(SmallInteger, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
