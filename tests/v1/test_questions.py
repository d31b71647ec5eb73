"""Tests for question endpoints."""

from fastapi import status
from sqlalchemy import func, select

from stackit.models import Answer, Question, Vote
from stackit.schemas.question import QuestionCreate
from stackit.services import questions, votes
from stackit.services.votes import VoteTarget

QUESTION_PAYLOAD = {
    "title": "Why does my FastAPI dependency run twice?",
    "description": "I added a dependency to the router and to the endpoint as well.",
    "tags": ["FastAPI", "python", "python"],
}


def _count(db_session, model) -> int:
    return db_session.scalar(select(func.count()).select_from(model))


def test_create_question(client, auth_headers, test_user) -> None:
    response = client.post("/api/v1/questions/", json=QUESTION_PAYLOAD, headers=auth_headers)
    assert response.status_code == status.HTTP_201_CREATED
    question_id = response.json()["questionId"]

    detail = client.get(f"/api/v1/questions/{question_id}").json()
    assert detail["title"] == QUESTION_PAYLOAD["title"]
    assert detail["tags"] == ["fastapi", "python"]
    assert detail["author"] == {"id": test_user.id, "name": "Test User", "reputation": 0}
    assert detail["score"] == 0
    assert detail["answerCount"] == 0
    assert detail["hasAcceptedAnswer"] is False


def test_create_question_requires_token(client) -> None:
    response = client.post("/api/v1/questions/", json=QUESTION_PAYLOAD)
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_create_question_validation(client, auth_headers) -> None:
    response = client.post(
        "/api/v1/questions/",
        json={**QUESTION_PAYLOAD, "title": "short", "tags": []},
        headers=auth_headers,
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["reason"] == "invalid_argument"


def test_get_question_counts_views(client, question) -> None:
    client.get(f"/api/v1/questions/{question.id}")
    response = client.get(f"/api/v1/questions/{question.id}")
    assert response.json()["viewCount"] == 2


def test_get_missing_question(client) -> None:
    response = client.get("/api/v1/questions/424242")
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json() == {"reason": "not_found", "detail": "Question not found"}


def test_update_question(client, auth_headers, question) -> None:
    response = client.put(
        f"/api/v1/questions/{question.id}",
        json={"title": "How do I roll back a failed SQLAlchemy flush?", "tags": ["orm"]},
        headers=auth_headers,
    )
    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["title"] == "How do I roll back a failed SQLAlchemy flush?"
    assert body["tags"] == ["orm"]
    assert body["description"] == "My transaction fails half way and leaves rows behind."


def test_update_question_forbidden(client, other_headers, question) -> None:
    response = client.put(
        f"/api/v1/questions/{question.id}",
        json={"title": "Someone else's title goes here"},
        headers=other_headers,
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_update_missing_question_is_not_found_for_anyone(client, other_headers) -> None:
    response = client.put(
        "/api/v1/questions/424242",
        json={"title": "Someone else's title goes here"},
        headers=other_headers,
    )
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_admin_can_update(client, admin_headers, question) -> None:
    response = client.put(
        f"/api/v1/questions/{question.id}",
        json={"description": "Edited by a moderator for clarity and tone."},
        headers=admin_headers,
    )
    assert response.status_code == status.HTTP_200_OK


def test_delete_question_cascades(client, db_session, auth_headers, other_user, question, answer) -> None:
    question_id = question.id
    votes.cast_vote(db_session, other_user, VoteTarget.question(question_id), "up")
    votes.cast_vote(db_session, other_user, VoteTarget.answer(answer.id), "down")
    assert _count(db_session, Vote) == 2

    response = client.delete(f"/api/v1/questions/{question_id}", headers=auth_headers)
    assert response.status_code == status.HTTP_204_NO_CONTENT

    assert _count(db_session, Question) == 0
    assert _count(db_session, Answer) == 0
    assert _count(db_session, Vote) == 0
    assert client.get(f"/api/v1/questions/{question_id}").status_code == status.HTTP_404_NOT_FOUND


def test_delete_question_forbidden(client, db_session, other_headers, question) -> None:
    response = client.delete(f"/api/v1/questions/{question.id}", headers=other_headers)
    assert response.status_code == status.HTTP_403_FORBIDDEN
    assert _count(db_session, Question) == 1


def test_list_questions_pagination(client, db_session, test_user) -> None:
    for n in range(3):
        questions.create_question(
            db_session,
            test_user,
            QuestionCreate(
                title=f"Pagination question number {n}",
                description="Enough description text to pass validation.",
                tags=["paging"],
            ),
        )

    response = client.get("/api/v1/questions/", params={"page": 2, "limit": 2})
    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["pagination"] == {"page": 2, "limit": 2, "total": 3, "pages": 2}
    assert len(body["questions"]) == 1


def test_list_questions_limit_bounds(client) -> None:
    response = client.get("/api/v1/questions/", params={"limit": 1000})
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_list_questions_sort_and_filter(client, db_session, test_user, other_user, question, answer) -> None:
    popular = questions.create_question(
        db_session,
        test_user,
        QuestionCreate(
            title="A question that everyone upvotes",
            description="Popular questions should sort first by votes.",
            tags=["popular"],
        ),
    )
    votes.cast_vote(db_session, other_user, VoteTarget.question(popular.id), "up")

    by_votes = client.get("/api/v1/questions/", params={"sort": "votes"}).json()["questions"]
    assert by_votes[0]["id"] == popular.id

    unanswered = client.get("/api/v1/questions/", params={"filter": "unanswered"}).json()["questions"]
    assert [q["id"] for q in unanswered] == [popular.id]

    by_answers = client.get("/api/v1/questions/", params={"sort": "answers"}).json()["questions"]
    assert by_answers[0]["id"] == question.id


def test_list_questions_search(client, question) -> None:
    hits = client.get("/api/v1/questions/", params={"search": "ROLL BACK"}).json()
    assert [q["id"] for q in hits["questions"]] == [question.id]

    misses = client.get("/api/v1/questions/", params={"search": "100%_"}).json()
    assert misses["questions"] == []


def test_list_questions_rejects_unknown_sort(client) -> None:
    response = client.get("/api/v1/questions/", params={"sort": "random"})
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_question_answers_missing_question(client) -> None:
    response = client.get("/api/v1/questions/424242/answers")
    assert response.status_code == status.HTTP_404_NOT_FOUND
