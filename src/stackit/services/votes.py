"""Vote ledger: toggle-or-switch voting on questions and answers."""
from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.orm import Session

from stackit.core.errors import NotFoundError
from stackit.models import Answer, Question, User, Vote
from stackit.services import scoring
from stackit.services.targets import TargetKind, VoteDirection, VoteTarget
from stackit.services.transaction import run_in_transaction

__all__ = [
    "TargetKind",
    "VoteDirection",
    "VoteOutcome",
    "VoteTarget",
    "cast_vote",
    "current_direction",
    "decide",
    "directions_for",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VoteOutcome:
    """Result of a cast: the voter's new direction, the score change and the new score."""

    direction: VoteDirection | None
    delta: int
    score: int


def decide(
    stored: VoteDirection | None,
    requested: VoteDirection,
) -> tuple[VoteDirection | None, int]:
    """Apply the toggle-or-switch table.

    | stored | requested | stored after | delta |
    |--------|-----------|--------------|-------|
    | none   | up        | up           | +1    |
    | none   | down      | down         | -1    |
    | up     | up        | none         | -1    |
    | down   | down      | none         | +1    |
    | up     | down      | down         | -2    |
    | down   | up        | up           | +2    |

    Returns:
        The direction to store (``None`` removes the vote) and the score delta.
    """
    if stored is None:
        return requested, int(requested)
    if stored is requested:
        return None, -int(stored)
    return requested, int(requested) - int(stored)


def _lock_target(db: Session, target: VoteTarget) -> Question | Answer:
    model = target.model
    row = db.scalars(
        select(model).where(model.id == target.id).with_for_update()
    ).first()
    if row is None:
        raise NotFoundError(f"{target.kind.value.capitalize()} not found")
    return row


def _ledger_row(db: Session, voter_id: int, target: VoteTarget) -> Vote | None:
    return db.scalars(
        select(Vote).where(
            Vote.voter_id == voter_id,
            target.ledger_column == target.id,
        )
    ).first()


def cast_vote(
    db: Session,
    voter: User,
    target: VoteTarget,
    direction: VoteDirection | str,
) -> VoteOutcome:
    """Record ``voter``'s vote on ``target`` and adjust its score.

    Casting the stored direction again retracts the vote; casting the other
    direction flips it. The ledger change and the score update commit
    together or not at all.

    Raises:
        InvalidArgumentError: If ``direction`` is not up or down.
        NotFoundError: If the target does not exist.
        ConflictError: If concurrent writes kept conflicting.
    """
    requested = VoteDirection.parse(direction)

    def _apply() -> VoteOutcome:
        _lock_target(db, target)
        existing = _ledger_row(db, voter.id, target)
        stored = VoteDirection(existing.direction) if existing is not None else None
        new_direction, delta = decide(stored, requested)

        if existing is None:
            vote = Vote(voter_id=voter.id, direction=int(requested))
            if target.kind is TargetKind.QUESTION:
                vote.question_id = target.id
            else:
                vote.answer_id = target.id
            db.add(vote)
        elif new_direction is None:
            db.delete(existing)
        else:
            existing.direction = int(new_direction)
        db.flush()

        score = scoring.apply_delta(db, target, delta)
        return VoteOutcome(direction=new_direction, delta=delta, score=score)

    outcome = run_in_transaction(
        db,
        _apply,
        action="vote",
        target=f"{target.kind.value}:{target.id}",
        voter=voter.id,
        direction=requested.label,
    )
    logger.debug(
        "Vote by user %s on %s %s: %s, delta %+d, score %d",
        voter.id,
        target.kind.value,
        target.id,
        outcome.direction.label if outcome.direction else "none",
        outcome.delta,
        outcome.score,
    )
    return outcome


def current_direction(db: Session, voter: User, target: VoteTarget) -> VoteDirection | None:
    """Return ``voter``'s stored direction on ``target``, if any."""
    existing = _ledger_row(db, voter.id, target)
    return VoteDirection(existing.direction) if existing is not None else None


def directions_for(
    db: Session,
    voter: User | None,
    kind: TargetKind,
    target_ids: Iterable[int],
) -> dict[int, VoteDirection]:
    """Return ``voter``'s stored directions keyed by target id.

    Used to annotate listings; anonymous callers get an empty mapping.
    """
    ids = list(target_ids)
    if voter is None or not ids:
        return {}
    column = kind.ledger_column
    rows = db.execute(
        select(column, Vote.direction).where(Vote.voter_id == voter.id, column.in_(ids))
    ).all()
    return {target_id: VoteDirection(direction) for target_id, direction in rows}
