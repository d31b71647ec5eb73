"""Tests for rollback and retry around vote and acceptance writes."""

from unittest.mock import patch

import pytest
from fastapi import status
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, OperationalError

from stackit.core.errors import ConflictError, NotFoundError
from stackit.models import Question, Vote
from stackit.services import scoring, votes
from stackit.services.transaction import run_in_transaction
from stackit.services.votes import VoteTarget


def _locked() -> OperationalError:
    return OperationalError("UPDATE questions", {}, Exception("database is locked"))


def _vote_rows(db_session) -> int:
    return db_session.scalar(select(func.count()).select_from(Vote))


def test_conflict_is_retried(db_session, other_user, question) -> None:
    real_apply_delta = scoring.apply_delta
    calls = []

    def _flaky(db, target, delta):
        calls.append(delta)
        if len(calls) == 1:
            raise _locked()
        return real_apply_delta(db, target, delta)

    with patch("stackit.services.scoring.apply_delta", side_effect=_flaky):
        outcome = votes.cast_vote(db_session, other_user, VoteTarget.question(question.id), "up")

    assert calls == [1, 1]
    assert outcome.score == 1
    assert _vote_rows(db_session) == 1


def test_exhausted_retries_surface_conflict(client, db_session, other_headers, question) -> None:
    question_id = question.id
    with patch("stackit.services.scoring.apply_delta", side_effect=_locked()) as mocked:
        response = client.post(
            f"/api/v1/questions/{question_id}/vote",
            json={"voteType": "up"},
            headers=other_headers,
        )

    assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
    assert response.json()["reason"] == "conflict"
    assert mocked.call_count == 3
    assert _vote_rows(db_session) == 0
    db_session.expire_all()
    assert db_session.get(Question, question_id).score == 0


def test_failure_after_ledger_write_rolls_back_both(db_session, other_user, question) -> None:
    question_id = question.id
    with patch("stackit.services.scoring.apply_delta", side_effect=RuntimeError("boom")):
        with pytest.raises(RuntimeError):
            votes.cast_vote(db_session, other_user, VoteTarget.question(question_id), "down")

    assert _vote_rows(db_session) == 0
    db_session.expire_all()
    assert db_session.get(Question, question_id).score == 0


def test_domain_errors_are_not_retried(db_session) -> None:
    calls = []

    def _operation():
        calls.append(1)
        raise NotFoundError("Question not found")

    with pytest.raises(NotFoundError):
        run_in_transaction(db_session, _operation, action="test", max_attempts=3)
    assert len(calls) == 1


def test_max_attempts_override(db_session) -> None:
    calls = []

    def _operation():
        calls.append(1)
        raise IntegrityError("INSERT INTO votes", {}, Exception("UNIQUE constraint failed"))

    with pytest.raises(ConflictError):
        run_in_transaction(db_session, _operation, action="test", max_attempts=2)
    assert len(calls) == 2


def test_ledger_rejects_duplicate_vote(db_session, other_user, question) -> None:
    db_session.add(Vote(voter_id=other_user.id, question_id=question.id, direction=1))
    db_session.add(Vote(voter_id=other_user.id, question_id=question.id, direction=-1))
    with pytest.raises(IntegrityError):
        db_session.flush()
    db_session.rollback()


def test_ledger_rejects_vote_without_target(db_session, other_user) -> None:
    db_session.add(Vote(voter_id=other_user.id, direction=1))
    with pytest.raises(IntegrityError):
        db_session.flush()
    db_session.rollback()


def test_double_submit_after_stale_read_retracts(db_session, other_user, question) -> None:
    """A second identical cast that missed the first one's row still retracts it."""
    target = VoteTarget.question(question.id)
    votes.cast_vote(db_session, other_user, target, "up")

    real_ledger_row = votes._ledger_row
    calls = []

    def _stale_once(db, voter_id, vote_target):
        calls.append(voter_id)
        if len(calls) == 1:
            return None
        return real_ledger_row(db, voter_id, vote_target)

    with patch("stackit.services.votes._ledger_row", side_effect=_stale_once):
        outcome = votes.cast_vote(db_session, other_user, target, "up")

    assert len(calls) == 2
    assert outcome.direction is None
    assert outcome.delta == -1
    assert outcome.score == 0
    assert _vote_rows(db_session) == 0
    db_session.expire_all()
    assert db_session.get(Question, question.id).score == 0
