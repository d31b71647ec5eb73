"""Question-related endpoints for the StackIt API."""

from fastapi import APIRouter, Query, Response, status

from stackit.api.v1.dependencies import CurrentUserDep, OptionalUserDep, SessionDep
from stackit.api.v1.responses import (
    to_acceptance_response,
    to_answer_response,
    to_question_response,
    to_vote_response,
    vote_label,
)
from stackit.core.settings import settings
from stackit.schemas.answer import AcceptanceResponse, AnswerResponse
from stackit.schemas.common import Pagination
from stackit.schemas.question import (
    QuestionCreate,
    QuestionCreated,
    QuestionFilter,
    QuestionListResponse,
    QuestionResponse,
    QuestionSort,
    QuestionUpdate,
)
from stackit.schemas.vote import MyVoteResponse, VoteRequest, VoteResponse
from stackit.services import acceptance, questions, votes
from stackit.services.targets import TargetKind, VoteTarget

router = APIRouter(prefix="/questions", tags=["questions"])


@router.get("/", response_model=QuestionListResponse)
def list_questions(
    db: SessionDep,
    current_user: OptionalUserDep,
    page: int = Query(1, ge=1, description="1-based page number"),
    limit: int = Query(
        settings.default_page_size,
        ge=1,
        le=settings.max_page_size,
        description="Questions per page",
    ),
    sort: QuestionSort = Query("newest", description="Sort order"),
    filter_by: QuestionFilter = Query("all", alias="filter", description="Result filter"),
    search: str | None = Query(None, max_length=200, description="Search title and description"),
) -> QuestionListResponse:
    """List questions with pagination, sorting, filtering and search."""
    result = questions.list_questions(
        db,
        page=page,
        limit=limit,
        sort=sort,
        filter_by=filter_by,
        search=search,
    )
    user_votes = votes.directions_for(
        db, current_user, TargetKind.QUESTION, (q.id for q in result.items)
    )
    return QuestionListResponse(
        questions=[to_question_response(q, user_votes.get(q.id)) for q in result.items],
        pagination=Pagination(
            page=result.page,
            limit=result.limit,
            total=result.total,
            pages=result.pages,
        ),
    )


@router.post("/", response_model=QuestionCreated, status_code=status.HTTP_201_CREATED)
def create_question(
    data: QuestionCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> QuestionCreated:
    """Ask a new question."""
    question = questions.create_question(db, current_user, data)
    return QuestionCreated(question_id=question.id)


@router.get("/{question_id}", response_model=QuestionResponse)
def get_question(
    question_id: int,
    db: SessionDep,
    current_user: OptionalUserDep,
) -> QuestionResponse:
    """Get a question by id and record the view."""
    question = questions.get_question(db, question_id, count_view=True)
    direction = None
    if current_user is not None:
        direction = votes.current_direction(db, current_user, VoteTarget.question(question.id))
    return to_question_response(question, direction)


@router.put("/{question_id}", response_model=QuestionResponse)
def update_question(
    question_id: int,
    data: QuestionUpdate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> QuestionResponse:
    """Edit a question (author or admin)."""
    question = questions.update_question(db, current_user, question_id, data)
    return to_question_response(question)


@router.delete("/{question_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_question(
    question_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> Response:
    """Delete a question with its answers and votes (author or admin)."""
    questions.delete_question(db, current_user, question_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{question_id}/answers", response_model=list[AnswerResponse])
def list_question_answers(
    question_id: int,
    db: SessionDep,
    current_user: OptionalUserDep,
) -> list[AnswerResponse]:
    """List a question's answers, accepted answer first."""
    answers = questions.list_answers(db, question_id)
    user_votes = votes.directions_for(db, current_user, TargetKind.ANSWER, (a.id for a in answers))
    return [to_answer_response(a, user_votes.get(a.id)) for a in answers]


@router.post("/{question_id}/vote", response_model=VoteResponse)
def vote_question(
    question_id: int,
    data: VoteRequest,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> VoteResponse:
    """Vote on a question; repeating the same direction retracts the vote."""
    target = VoteTarget.question(question_id)
    outcome = votes.cast_vote(db, current_user, target, data.vote_type)
    return to_vote_response(target, outcome)


@router.get("/{question_id}/vote", response_model=MyVoteResponse)
def get_my_question_vote(
    question_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> MyVoteResponse:
    """Get the caller's current vote on a question."""
    questions.get_question(db, question_id)
    direction = votes.current_direction(db, current_user, VoteTarget.question(question_id))
    return MyVoteResponse(user_vote=vote_label(direction))


@router.post("/{question_id}/accept-answer/{answer_id}", response_model=AcceptanceResponse)
def accept_answer(
    question_id: int,
    answer_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> AcceptanceResponse:
    """Accept one of the question's answers (question author or admin)."""
    state = acceptance.accept_answer(db, current_user, answer_id, question_id=question_id)
    return to_acceptance_response(state)


@router.delete("/{question_id}/accept-answer/{answer_id}", response_model=AcceptanceResponse)
def unaccept_answer(
    question_id: int,
    answer_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> AcceptanceResponse:
    """Withdraw acceptance of an answer (question author or admin)."""
    state = acceptance.unaccept_answer(db, current_user, answer_id, question_id=question_id)
    return to_acceptance_response(state)
