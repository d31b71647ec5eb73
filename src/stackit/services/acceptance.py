"""Accepted-answer state per question.

A question is either without an accepted answer or has exactly one. The
question's author (or an admin) may accept any answer of the question,
switch acceptance to another answer, or withdraw it.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from stackit.core.errors import NotFoundError
from stackit.models import Answer, Question, User
from stackit.services.permissions import ensure_owner_or_admin
from stackit.services.transaction import run_in_transaction

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AcceptanceState:
    question_id: int
    accepted_answer_id: int | None

    @property
    def has_accepted_answer(self) -> bool:
        return self.accepted_answer_id is not None


def _lock_question(db: Session, question_id: int) -> Question:
    question = db.scalars(
        select(Question).where(Question.id == question_id).with_for_update()
    ).first()
    if question is None:
        raise NotFoundError("Question not found")
    return question


def _resolve(
    db: Session,
    actor: User,
    answer_id: int,
    question_id: int | None,
) -> tuple[Question, Answer]:
    """Load and lock the question, then the answer, then check ownership."""
    if question_id is not None:
        question = _lock_question(db, question_id)
        answer = db.get(Answer, answer_id)
        if answer is None or answer.question_id != question.id:
            raise NotFoundError("Answer not found")
    else:
        answer = db.get(Answer, answer_id)
        if answer is None:
            raise NotFoundError("Answer not found")
        question = _lock_question(db, answer.question_id)

    ensure_owner_or_admin(
        actor,
        question.author_id,
        "Not authorized to accept answers for this question",
    )
    return question, answer


def accepted_answer_id(db: Session, question_id: int) -> int | None:
    """Return the id of the question's accepted answer, if any."""
    return db.scalar(
        select(Answer.id).where(
            Answer.question_id == question_id,
            Answer.is_accepted.is_(True),
        )
    )


def accept_answer(
    db: Session,
    actor: User,
    answer_id: int,
    question_id: int | None = None,
) -> AcceptanceState:
    """Mark ``answer_id`` as the accepted answer of its question.

    Any previously accepted answer of the same question is unmarked in the
    same transaction. Accepting the already accepted answer changes nothing.

    Args:
        db: Database session.
        actor: Authenticated caller; must author the question or be an admin.
        answer_id: Answer to accept.
        question_id: When given, the answer must belong to this question.

    Raises:
        NotFoundError: If the question or answer does not exist or do not match.
        ForbiddenError: If ``actor`` is neither the question author nor an admin.
    """

    def _apply() -> AcceptanceState:
        question, answer = _resolve(db, actor, answer_id, question_id)
        db.execute(
            update(Answer)
            .where(
                Answer.question_id == question.id,
                Answer.id != answer.id,
                Answer.is_accepted.is_(True),
            )
            .values(is_accepted=False)
        )
        answer.is_accepted = True
        question.has_accepted_answer = True
        db.flush()
        return AcceptanceState(question_id=question.id, accepted_answer_id=answer.id)

    state = run_in_transaction(
        db,
        _apply,
        action="accept answer",
        actor=actor.id,
        answer=answer_id,
        question=question_id,
    )
    logger.info(
        "User %s accepted answer %s on question %s",
        actor.id,
        state.accepted_answer_id,
        state.question_id,
    )
    return state


def unaccept_answer(
    db: Session,
    actor: User,
    answer_id: int,
    question_id: int | None = None,
) -> AcceptanceState:
    """Withdraw acceptance of ``answer_id``.

    Withdrawing an answer that is not the accepted one leaves the question's
    state untouched.

    Raises:
        NotFoundError: If the question or answer does not exist or do not match.
        ForbiddenError: If ``actor`` is neither the question author nor an admin.
    """

    def _apply() -> AcceptanceState:
        question, answer = _resolve(db, actor, answer_id, question_id)
        if answer.is_accepted:
            answer.is_accepted = False
            question.has_accepted_answer = False
            db.flush()
        return AcceptanceState(
            question_id=question.id,
            accepted_answer_id=accepted_answer_id(db, question.id),
        )

    state = run_in_transaction(
        db,
        _apply,
        action="unaccept answer",
        actor=actor.id,
        answer=answer_id,
        question=question_id,
    )
    logger.info(
        "User %s withdrew acceptance of answer %s on question %s",
        actor.id,
        answer_id,
        state.question_id,
    )
    return state
