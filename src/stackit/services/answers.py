"""Service-level helpers for posting, editing and removing answers."""
from __future__ import annotations

import logging
from datetime import UTC, datetime

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from stackit.core.errors import NotFoundError
from stackit.models import Answer, Question, User
from stackit.schemas.answer import AnswerCreate
from stackit.services.permissions import ensure_owner_or_admin
from stackit.services.transaction import run_in_transaction

__all__ = ["create_answer", "delete_answer", "get_answer", "update_answer"]

logger = logging.getLogger(__name__)


def get_answer(db: Session, answer_id: int) -> Answer:
    """Return an answer by id.

    Raises:
        NotFoundError: If the answer does not exist.
    """
    answer = db.get(Answer, answer_id)
    if answer is None:
        raise NotFoundError("Answer not found")
    return answer


def _lock_question(db: Session, question_id: int) -> Question:
    question = db.scalars(
        select(Question).where(Question.id == question_id).with_for_update()
    ).first()
    if question is None:
        raise NotFoundError("Question not found")
    return question


def _bump_answer_count(db: Session, question_id: int, step: int) -> None:
    db.execute(
        update(Question)
        .where(Question.id == question_id)
        .values(answer_count=Question.answer_count + step)
    )


def create_answer(db: Session, author: User, data: AnswerCreate) -> Answer:
    """Post an answer and bump the question's answer count.

    Raises:
        NotFoundError: If the question does not exist.
    """

    def _apply() -> Answer:
        question = _lock_question(db, data.question_id)
        answer = Answer(question_id=question.id, author_id=author.id, body=data.content)
        db.add(answer)
        db.flush()
        _bump_answer_count(db, question.id, 1)
        return answer

    answer = run_in_transaction(
        db, _apply, action="create answer", author=author.id, question=data.question_id
    )
    db.refresh(answer)
    logger.info("User %s answered question %s (answer %s)", author.id, answer.question_id, answer.id)
    return answer


def update_answer(db: Session, actor: User, answer_id: int, content: str) -> Answer:
    """Replace an answer's body.

    Raises:
        NotFoundError: If the answer does not exist.
        ForbiddenError: If ``actor`` is neither the author nor an admin.
    """

    def _apply() -> Answer:
        answer = get_answer(db, answer_id)
        ensure_owner_or_admin(actor, answer.author_id, "Not authorized to update this answer")
        answer.body = content
        answer.updated_at = datetime.now(UTC)
        db.flush()
        return answer

    answer = run_in_transaction(db, _apply, action="update answer", actor=actor.id, answer=answer_id)
    db.refresh(answer)
    return answer


def delete_answer(db: Session, actor: User, answer_id: int) -> None:
    """Remove an answer and its votes.

    Removing the accepted answer leaves the question without one.

    Raises:
        NotFoundError: If the answer does not exist.
        ForbiddenError: If ``actor`` is neither the author nor an admin.
    """

    def _apply() -> None:
        answer = get_answer(db, answer_id)
        ensure_owner_or_admin(actor, answer.author_id, "Not authorized to delete this answer")
        question = _lock_question(db, answer.question_id)
        if answer.is_accepted:
            question.has_accepted_answer = False
        db.delete(answer)
        db.flush()
        _bump_answer_count(db, question.id, -1)

    run_in_transaction(db, _apply, action="delete answer", actor=actor.id, answer=answer_id)
    logger.info("User %s deleted answer %s", actor.id, answer_id)
