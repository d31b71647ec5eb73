"""Operator endpoints: schema health and score reconciliation."""

from fastapi import APIRouter, Query

from stackit.api.v1.dependencies import AdminUserDep, SessionDep
from stackit.db.bootstrap import verify_schema
from stackit.schemas.system import ReconcileResponse, ScoreDriftResponse
from stackit.services import scoring

router = APIRouter(prefix="/system", tags=["system"])


@router.get("/health/db")
def database_health(db: SessionDep) -> dict[str, str]:
    """Verify that the live database schema matches the models."""
    verify_schema(db.get_bind())
    return {"status": "ok"}


@router.post("/scores/reconcile", response_model=ReconcileResponse)
def reconcile_scores(
    _admin: AdminUserDep,
    db: SessionDep,
    repair: bool = Query(False, description="Overwrite drifting scores with ledger totals"),
) -> ReconcileResponse:
    """Compare stored scores with the vote ledger, optionally repairing them (admin only)."""
    drift = scoring.reconcile(db, repair=repair)
    return ReconcileResponse(
        repaired=repair and bool(drift),
        drift=[
            ScoreDriftResponse(
                target=entry.kind.value,
                id=entry.id,
                stored=entry.stored,
                recomputed=entry.recomputed,
            )
            for entry in drift
        ],
    )
