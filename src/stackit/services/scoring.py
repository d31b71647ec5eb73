"""Score aggregation for questions and answers.

The ``score`` column on each target is a running total maintained by
``apply_delta`` in the same transaction as the vote ledger write. The ledger
itself stays the source of truth: ``recompute`` derives a score from it and
``reconcile`` compares or repairs the stored totals.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from stackit.core.errors import NotFoundError
from stackit.models import Vote
from stackit.services.targets import TargetKind, VoteTarget

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScoreDrift:
    """A target whose stored score disagrees with its ledger."""

    kind: TargetKind
    id: int
    stored: int
    recomputed: int


def apply_delta(db: Session, target: VoteTarget, delta: int) -> int:
    """Add ``delta`` to the target's stored score and return the new value.

    The increment is a single ``UPDATE ... SET score = score + :delta`` so
    concurrent voters on the same target never lose each other's changes.
    Must run inside the transaction that wrote the matching ledger change.

    Raises:
        NotFoundError: If the target row does not exist.
    """
    model = target.model
    db.execute(
        update(model)
        .where(model.id == target.id)
        .values(score=model.score + delta)
    )
    score = db.scalar(select(model.score).where(model.id == target.id))
    if score is None:
        raise NotFoundError(f"{target.kind.value.capitalize()} not found")
    return int(score)


def recompute(db: Session, target: VoteTarget) -> int:
    """Derive the target's score from the vote ledger."""
    total = db.scalar(
        select(func.coalesce(func.sum(Vote.direction), 0)).where(
            target.ledger_column == target.id
        )
    )
    return int(total or 0)


def find_drift(db: Session, kind: TargetKind) -> list[ScoreDrift]:
    """Return every target of ``kind`` whose stored score differs from its ledger."""
    model = kind.model
    column = kind.ledger_column
    ledger = (
        select(column.label("target_id"), func.sum(Vote.direction).label("total"))
        .where(column.is_not(None))
        .group_by(column)
        .subquery()
    )
    recomputed = func.coalesce(ledger.c.total, 0)
    rows = db.execute(
        select(model.id, model.score, recomputed)
        .outerjoin(ledger, ledger.c.target_id == model.id)
        .where(model.score != recomputed)
        .order_by(model.id)
    ).all()
    return [
        ScoreDrift(kind=kind, id=row_id, stored=int(stored), recomputed=int(total))
        for row_id, stored, total in rows
    ]


def reconcile(db: Session, *, repair: bool = False) -> list[ScoreDrift]:
    """Compare stored scores against the ledger for every question and answer.

    Args:
        db: Database session.
        repair: Overwrite drifting scores with the recomputed value and commit.

    Returns:
        The drift found before any repair.
    """
    drift: list[ScoreDrift] = []
    for kind in TargetKind:
        drift.extend(find_drift(db, kind))

    if not drift:
        logger.info("Score reconciliation found no drift")
        return drift

    for entry in drift:
        logger.warning(
            "Score drift on %s %s: stored %d, ledger %d",
            entry.kind.value,
            entry.id,
            entry.stored,
            entry.recomputed,
        )

    if repair:
        try:
            for entry in drift:
                model = entry.kind.model
                db.execute(
                    update(model)
                    .where(model.id == entry.id)
                    .values(score=recompute(db, VoteTarget(entry.kind, entry.id)))
                )
            db.commit()
        except Exception:
            db.rollback()
            raise
        logger.info("Repaired %d drifting scores", len(drift))

    return drift
