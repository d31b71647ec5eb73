"""Answer-related endpoints for the StackIt API."""

from fastapi import APIRouter, Response, status

from stackit.api.v1.dependencies import CurrentUserDep, OptionalUserDep, SessionDep
from stackit.api.v1.responses import (
    to_acceptance_response,
    to_answer_response,
    to_vote_response,
    vote_label,
)
from stackit.schemas.answer import (
    AcceptanceResponse,
    AnswerCreate,
    AnswerCreated,
    AnswerResponse,
    AnswerUpdate,
)
from stackit.schemas.vote import MyVoteResponse, VoteRequest, VoteResponse
from stackit.services import acceptance, answers, questions, votes
from stackit.services.targets import TargetKind, VoteTarget

router = APIRouter(prefix="/answers", tags=["answers"])


@router.get("/question/{question_id}", response_model=list[AnswerResponse])
def list_answers_for_question(
    question_id: int,
    db: SessionDep,
    current_user: OptionalUserDep,
) -> list[AnswerResponse]:
    """List a question's answers, accepted answer first."""
    items = questions.list_answers(db, question_id)
    user_votes = votes.directions_for(db, current_user, TargetKind.ANSWER, (a.id for a in items))
    return [to_answer_response(a, user_votes.get(a.id)) for a in items]


@router.post("/", response_model=AnswerCreated, status_code=status.HTTP_201_CREATED)
def create_answer(
    data: AnswerCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> AnswerCreated:
    """Post an answer to a question."""
    answer = answers.create_answer(db, current_user, data)
    return AnswerCreated(answer_id=answer.id)


@router.get("/{answer_id}", response_model=AnswerResponse)
def get_answer(
    answer_id: int,
    db: SessionDep,
    current_user: OptionalUserDep,
) -> AnswerResponse:
    """Get a single answer."""
    answer = answers.get_answer(db, answer_id)
    direction = None
    if current_user is not None:
        direction = votes.current_direction(db, current_user, VoteTarget.answer(answer.id))
    return to_answer_response(answer, direction)


@router.put("/{answer_id}", response_model=AnswerResponse)
def update_answer(
    answer_id: int,
    data: AnswerUpdate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> AnswerResponse:
    """Edit an answer (author or admin)."""
    answer = answers.update_answer(db, current_user, answer_id, data.content)
    return to_answer_response(answer)


@router.delete("/{answer_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_answer(
    answer_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> Response:
    """Delete an answer and its votes (author or admin)."""
    answers.delete_answer(db, current_user, answer_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{answer_id}/vote", response_model=VoteResponse)
def vote_answer(
    answer_id: int,
    data: VoteRequest,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> VoteResponse:
    """Vote on an answer; repeating the same direction retracts the vote."""
    target = VoteTarget.answer(answer_id)
    outcome = votes.cast_vote(db, current_user, target, data.vote_type)
    return to_vote_response(target, outcome)


@router.get("/{answer_id}/vote", response_model=MyVoteResponse)
def get_my_answer_vote(
    answer_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> MyVoteResponse:
    """Get the caller's current vote on an answer."""
    answers.get_answer(db, answer_id)
    direction = votes.current_direction(db, current_user, VoteTarget.answer(answer_id))
    return MyVoteResponse(user_vote=vote_label(direction))


@router.post("/{answer_id}/accept", response_model=AcceptanceResponse)
def accept_answer(
    answer_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> AcceptanceResponse:
    """Accept this answer on its question (question author or admin)."""
    return to_acceptance_response(acceptance.accept_answer(db, current_user, answer_id))


@router.delete("/{answer_id}/accept", response_model=AcceptanceResponse)
def unaccept_answer(
    answer_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> AcceptanceResponse:
    """Withdraw acceptance of this answer (question author or admin)."""
    return to_acceptance_response(acceptance.unaccept_answer(db, current_user, answer_id))
