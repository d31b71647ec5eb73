"""Service-level helpers for asking, listing and editing questions."""
from __future__ import annotations

import logging
import math
from datetime import UTC, datetime

from sqlalchemy import func, or_, select, update
from sqlalchemy.orm import Session, selectinload

from stackit.core.errors import NotFoundError
from stackit.models import Answer, Question, Tag, User
from stackit.schemas.question import QuestionCreate, QuestionFilter, QuestionSort, QuestionUpdate
from stackit.services.permissions import ensure_owner_or_admin
from stackit.services.transaction import run_in_transaction

__all__ = [
    "QuestionPage",
    "create_question",
    "delete_question",
    "get_question",
    "list_answers",
    "list_questions",
    "update_question",
]

logger = logging.getLogger(__name__)

_SORT_ORDER = {
    "newest": (Question.created_at.desc(), Question.id.desc()),
    "oldest": (Question.created_at.asc(), Question.id.asc()),
    "votes": (Question.score.desc(), Question.id.desc()),
    "answers": (Question.answer_count.desc(), Question.id.desc()),
    "views": (Question.view_count.desc(), Question.id.desc()),
}


class QuestionPage:
    """One page of questions plus the total match count."""

    def __init__(self, items: list[Question], *, page: int, limit: int, total: int):
        self.items = items
        self.page = page
        self.limit = limit
        self.total = total

    @property
    def pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0


def _resolve_tags(db: Session, names: list[str]) -> list[Tag]:
    """Return tags for ``names``, creating the missing ones."""
    existing = {
        tag.name: tag for tag in db.scalars(select(Tag).where(Tag.name.in_(names)))
    }
    tags: list[Tag] = []
    for name in names:
        tag = existing.get(name)
        if tag is None:
            tag = Tag(name=name)
            db.add(tag)
            existing[name] = tag
        tags.append(tag)
    return tags


def list_questions(
    db: Session,
    *,
    page: int = 1,
    limit: int = 10,
    sort: QuestionSort = "newest",
    filter_by: QuestionFilter = "all",
    search: str | None = None,
    author_id: int | None = None,
) -> QuestionPage:
    """Return a filtered, sorted page of questions.

    Args:
        db: Database session
        page: 1-based page number
        limit: Page size
        sort: One of newest, oldest, votes, answers, views
        filter_by: all, unanswered (no answers) or solved (has an accepted answer)
        search: Case-insensitive substring matched against title and description
        author_id: Restrict to questions asked by this user
    """
    query = select(Question)
    if filter_by == "unanswered":
        query = query.where(Question.answer_count == 0)
    elif filter_by == "solved":
        query = query.where(Question.has_accepted_answer.is_(True))

    if search:
        term = search.strip()
        query = query.where(
            or_(
                Question.title.icontains(term, autoescape=True),
                Question.description.icontains(term, autoescape=True),
            )
        )

    if author_id is not None:
        query = query.where(Question.author_id == author_id)

    total = db.scalar(select(func.count()).select_from(query.subquery())) or 0
    items = db.scalars(
        query.options(selectinload(Question.author), selectinload(Question.tags))
        .order_by(*_SORT_ORDER[sort])
        .limit(limit)
        .offset((page - 1) * limit)
    ).all()
    return QuestionPage(list(items), page=page, limit=limit, total=total)


def get_question(db: Session, question_id: int, *, count_view: bool = False) -> Question:
    """Return a question by id, optionally recording a view.

    Raises:
        NotFoundError: If the question does not exist.
    """
    if count_view:
        result = db.execute(
            update(Question)
            .where(Question.id == question_id)
            .values(view_count=Question.view_count + 1)
        )
        db.commit()
        if result.rowcount == 0:
            raise NotFoundError("Question not found")

    question = db.get(Question, question_id, populate_existing=count_view)
    if question is None:
        raise NotFoundError("Question not found")
    return question


def create_question(db: Session, author: User, data: QuestionCreate) -> Question:
    """Persist a new question with its tags."""

    def _apply() -> Question:
        question = Question(
            author_id=author.id,
            title=data.title.strip(),
            description=data.description,
        )
        question.tags = _resolve_tags(db, data.tags)
        db.add(question)
        db.flush()
        return question

    question = run_in_transaction(db, _apply, action="create question", author=author.id)
    db.refresh(question)
    logger.info("User %s asked question %s", author.id, question.id)
    return question


def update_question(
    db: Session,
    actor: User,
    question_id: int,
    data: QuestionUpdate,
) -> Question:
    """Apply a partial update; tags are replaced when given.

    Raises:
        NotFoundError: If the question does not exist.
        ForbiddenError: If ``actor`` is neither the author nor an admin.
    """

    def _apply() -> Question:
        question = get_question(db, question_id)
        ensure_owner_or_admin(actor, question.author_id, "Not authorized to update this question")
        if data.title is not None:
            question.title = data.title.strip()
        if data.description is not None:
            question.description = data.description
        if data.tags is not None:
            question.tags = _resolve_tags(db, data.tags)
        question.updated_at = datetime.now(UTC)
        db.flush()
        return question

    question = run_in_transaction(
        db, _apply, action="update question", actor=actor.id, question=question_id
    )
    db.refresh(question)
    return question


def delete_question(db: Session, actor: User, question_id: int) -> None:
    """Delete a question with its answers and every vote on either.

    Raises:
        NotFoundError: If the question does not exist.
        ForbiddenError: If ``actor`` is neither the author nor an admin.
    """

    def _apply() -> None:
        question = get_question(db, question_id)
        ensure_owner_or_admin(actor, question.author_id, "Not authorized to delete this question")
        db.delete(question)
        db.flush()

    run_in_transaction(db, _apply, action="delete question", actor=actor.id, question=question_id)
    logger.info("User %s deleted question %s", actor.id, question_id)


def list_answers(db: Session, question_id: int) -> list[Answer]:
    """Return a question's answers: accepted first, then by score, then oldest first.

    Raises:
        NotFoundError: If the question does not exist.
    """
    get_question(db, question_id)
    answers = db.scalars(
        select(Answer)
        .where(Answer.question_id == question_id)
        .options(selectinload(Answer.author))
        .order_by(
            Answer.is_accepted.desc(),
            Answer.score.desc(),
            Answer.created_at.asc(),
            Answer.id.asc(),
        )
    ).all()
    return list(answers)
