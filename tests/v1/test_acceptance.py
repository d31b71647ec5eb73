"""Tests for accepting and unaccepting answers."""

import pytest
from fastapi import status

from stackit.core.errors import ForbiddenError, NotFoundError
from stackit.models import Answer, Question
from stackit.schemas.question import QuestionCreate
from stackit.services import acceptance, questions


def _flags(db_session, question_id: int, *answer_ids: int) -> tuple[bool, list[bool]]:
    db_session.expire_all()
    question = db_session.get(Question, question_id)
    return question.has_accepted_answer, [db_session.get(Answer, a).is_accepted for a in answer_ids]


def test_accept_then_switch(client, db_session, auth_headers, question, answer, second_answer) -> None:
    """Accepting A then B leaves only B accepted."""
    qid, a_id, b_id = question.id, answer.id, second_answer.id

    response = client.post(f"/api/v1/questions/{qid}/accept-answer/{a_id}", headers=auth_headers)
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"questionId": qid, "acceptedAnswerId": a_id, "hasAcceptedAnswer": True}
    assert _flags(db_session, qid, a_id, b_id) == (True, [True, False])

    response = client.post(f"/api/v1/answers/{b_id}/accept", headers=auth_headers)
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["acceptedAnswerId"] == b_id
    assert _flags(db_session, qid, a_id, b_id) == (True, [False, True])


def test_reaccept_is_noop(db_session, test_user, question, answer) -> None:
    first = acceptance.accept_answer(db_session, test_user, answer.id)
    second = acceptance.accept_answer(db_session, test_user, answer.id)
    assert first == second
    assert acceptance.accepted_answer_id(db_session, question.id) == answer.id


def test_non_author_cannot_accept(client, db_session, other_headers, question, answer) -> None:
    qid, a_id = question.id, answer.id
    response = client.post(f"/api/v1/questions/{qid}/accept-answer/{a_id}", headers=other_headers)

    assert response.status_code == status.HTTP_403_FORBIDDEN
    assert response.json()["reason"] == "forbidden"
    assert _flags(db_session, qid, a_id) == (False, [False])


def test_admin_can_accept(client, db_session, admin_headers, question, answer) -> None:
    qid, a_id = question.id, answer.id
    response = client.post(f"/api/v1/answers/{a_id}/accept", headers=admin_headers)
    assert response.status_code == status.HTTP_200_OK
    assert _flags(db_session, qid, a_id) == (True, [True])


def test_accept_missing_answer(client, auth_headers, question) -> None:
    response = client.post(f"/api/v1/questions/{question.id}/accept-answer/999", headers=auth_headers)
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["detail"] == "Answer not found"


def test_accept_missing_question(client, auth_headers, answer) -> None:
    response = client.post(f"/api/v1/questions/999/accept-answer/{answer.id}", headers=auth_headers)
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["detail"] == "Question not found"


def test_accept_answer_of_other_question(db_session, test_user, question, answer) -> None:
    other = questions.create_question(
        db_session,
        test_user,
        QuestionCreate(
            title="A second question about sessions",
            description="This one has no answers posted to it yet.",
            tags=["python"],
        ),
    )
    with pytest.raises(NotFoundError):
        acceptance.accept_answer(db_session, test_user, answer.id, question_id=other.id)
    assert acceptance.accepted_answer_id(db_session, question.id) is None


def test_not_found_wins_over_forbidden(db_session, other_user, question) -> None:
    with pytest.raises(NotFoundError):
        acceptance.accept_answer(db_session, other_user, 999, question_id=question.id)


def test_forbidden_for_stranger(db_session, third_user, answer) -> None:
    with pytest.raises(ForbiddenError):
        acceptance.accept_answer(db_session, third_user, answer.id)


def test_unaccept(client, db_session, auth_headers, question, answer) -> None:
    qid, a_id = question.id, answer.id
    client.post(f"/api/v1/answers/{a_id}/accept", headers=auth_headers)

    response = client.delete(f"/api/v1/questions/{qid}/accept-answer/{a_id}", headers=auth_headers)
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"questionId": qid, "acceptedAnswerId": None, "hasAcceptedAnswer": False}
    assert _flags(db_session, qid, a_id) == (False, [False])


def test_unaccept_other_answer_keeps_state(db_session, test_user, question, answer, second_answer) -> None:
    acceptance.accept_answer(db_session, test_user, answer.id)
    state = acceptance.unaccept_answer(db_session, test_user, second_answer.id)

    assert state.accepted_answer_id == answer.id
    assert state.has_accepted_answer is True


def test_unaccept_requires_question_author(client, other_headers, answer) -> None:
    response = client.delete(f"/api/v1/answers/{answer.id}/accept", headers=other_headers)
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_accepted_answer_listed_first(
    client, auth_headers, user_factory, headers_for, question, answer, second_answer
) -> None:
    voter = headers_for(user_factory("Voter"))
    client.post(f"/api/v1/answers/{answer.id}/vote", json={"voteType": "up"}, headers=voter)
    client.post(f"/api/v1/answers/{second_answer.id}/accept", headers=auth_headers)

    listing = client.get(f"/api/v1/answers/question/{question.id}").json()
    assert [a["id"] for a in listing] == [second_answer.id, answer.id]
    assert listing[0]["isAccepted"] is True


def test_solved_filter(client, auth_headers, question, answer) -> None:
    assert client.get("/api/v1/questions/", params={"filter": "solved"}).json()["questions"] == []
    client.post(f"/api/v1/answers/{answer.id}/accept", headers=auth_headers)

    solved = client.get("/api/v1/questions/", params={"filter": "solved"}).json()["questions"]
    assert [q["id"] for q in solved] == [question.id]
