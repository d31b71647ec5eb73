"""Conversions from ORM rows and service results to API schemas."""

from stackit.models import Answer, Question
from stackit.schemas.answer import AcceptanceResponse, AnswerResponse
from stackit.schemas.question import QuestionResponse
from stackit.schemas.vote import VoteResponse
from stackit.services.acceptance import AcceptanceState
from stackit.services.targets import VoteDirection, VoteTarget
from stackit.services.votes import VoteOutcome


def vote_label(direction: VoteDirection | None) -> str | None:
    """Return the wire name of a stored direction."""
    return direction.label if direction is not None else None


def to_question_response(
    question: Question,
    direction: VoteDirection | None = None,
) -> QuestionResponse:
    """Convert a Question ORM instance to its API schema."""
    response = QuestionResponse.model_validate(question)
    response.user_vote = vote_label(direction)
    return response


def to_answer_response(answer: Answer, direction: VoteDirection | None = None) -> AnswerResponse:
    """Convert an Answer ORM instance to its API schema."""
    response = AnswerResponse.model_validate(answer)
    response.user_vote = vote_label(direction)
    return response


def to_acceptance_response(state: AcceptanceState) -> AcceptanceResponse:
    return AcceptanceResponse(
        question_id=state.question_id,
        accepted_answer_id=state.accepted_answer_id,
        has_accepted_answer=state.has_accepted_answer,
    )


def to_vote_response(target: VoteTarget, outcome: VoteOutcome) -> VoteResponse:
    return VoteResponse(
        target=target.kind.value,
        id=target.id,
        user_vote=vote_label(outcome.direction),
        delta=outcome.delta,
        score=outcome.score,
    )
