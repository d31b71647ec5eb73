"""Commit-or-rollback helper with bounded retries for contended writes."""
from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, TypeVar

from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Session

from stackit.core.errors import ConflictError, StackItError
from stackit.core.settings import settings

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Raised by the database for duplicate ledger inserts, deadlocks and
# serialization failures; all of them are safe to retry from scratch.
TRANSIENT_ERRORS = (IntegrityError, OperationalError)


def _describe(context: dict[str, Any]) -> str:
    return ", ".join(f"{key}={value}" for key, value in context.items())


def run_in_transaction(
    db: Session,
    operation: Callable[[], T],
    *,
    action: str,
    max_attempts: int | None = None,
    **context: Any,
) -> T:
    """Run ``operation`` and commit, rolling back on any failure.

    The operation must do all of its reads and writes through ``db`` so that a
    rollback discards them together. Transient database conflicts are retried
    with a fresh transaction; domain errors propagate unchanged.

    Args:
        db: Session the operation works in.
        operation: Callable performing the reads and writes.
        action: Short label used in log messages.
        max_attempts: Overrides ``VOTE_MAX_RETRIES``.
        **context: Identifiers (actor, target, direction) logged on failure.

    Returns:
        Whatever ``operation`` returned on the attempt that committed.

    Raises:
        ConflictError: If every attempt hit a transient conflict.
    """
    attempts = max_attempts or settings.vote_max_retries
    for attempt in range(1, attempts + 1):
        try:
            result = operation()
            db.commit()
            return result
        except TRANSIENT_ERRORS as exc:
            db.rollback()
            if attempt >= attempts:
                logger.error(
                    "%s failed after %d attempts (%s): %s",
                    action,
                    attempts,
                    _describe(context),
                    exc,
                )
                raise ConflictError() from exc
            logger.warning(
                "%s conflicted on attempt %d/%d (%s), retrying",
                action,
                attempt,
                attempts,
                _describe(context),
            )
        except StackItError:
            db.rollback()
            raise
        except Exception:
            db.rollback()
            logger.exception("%s failed (%s)", action, _describe(context))
            raise

    raise ConflictError()  # pragma: no cover - loop always returns or raises
