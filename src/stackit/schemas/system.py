"""Schemas for operator endpoints."""
from __future__ import annotations

from typing import Literal

from .common import APIModel


class ScoreDriftResponse(APIModel):
    """A target whose stored score disagrees with its vote ledger."""

    target: Literal["question", "answer"]
    id: int
    stored: int
    recomputed: int


class ReconcileResponse(APIModel):
    """Outcome of a score reconciliation pass."""

    repaired: bool
    drift: list[ScoreDriftResponse]
