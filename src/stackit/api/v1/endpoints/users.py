"""User profile endpoints for the StackIt API."""

from fastapi import APIRouter, Query

from stackit.api.v1.dependencies import CurrentUserDep, SessionDep
from stackit.api.v1.responses import to_question_response
from stackit.core.settings import settings
from stackit.schemas.question import QuestionResponse
from stackit.schemas.user import PublicUserResponse, UserAnswerResponse, UserResponse, UserUpdate
from stackit.services import questions, users

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=UserResponse)
def get_current_profile(current_user: CurrentUserDep) -> UserResponse:
    """Get the authenticated caller's profile."""
    return UserResponse.model_validate(current_user)


@router.put("/me", response_model=UserResponse)
def update_current_profile(
    data: UserUpdate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> UserResponse:
    """Update the authenticated caller's display name."""
    user = users.update_profile(db, current_user, data.name)
    return UserResponse.model_validate(user)


@router.get("/me/questions", response_model=list[QuestionResponse])
def list_my_questions(
    current_user: CurrentUserDep,
    db: SessionDep,
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
) -> list[QuestionResponse]:
    """List the caller's questions, newest first."""
    result = questions.list_questions(db, page=page, limit=limit, author_id=current_user.id)
    return [to_question_response(q) for q in result.items]


@router.get("/me/answers", response_model=list[UserAnswerResponse])
def list_my_answers(
    current_user: CurrentUserDep,
    db: SessionDep,
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
) -> list[UserAnswerResponse]:
    """List the caller's answers with the questions they belong to."""
    items = users.list_user_answers(db, current_user, page=page, limit=limit)
    return [UserAnswerResponse.model_validate(a) for a in items]


@router.get("/{user_id}", response_model=PublicUserResponse)
def get_user(user_id: int, db: SessionDep) -> PublicUserResponse:
    """Get a user's public profile."""
    return PublicUserResponse.model_validate(users.get_user(db, user_id))
