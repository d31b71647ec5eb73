"""Ownership checks shared by question, answer and acceptance services."""
from __future__ import annotations

from stackit.core.errors import ForbiddenError
from stackit.models import User


def ensure_owner_or_admin(actor: User, owner_id: int, message: str) -> None:
    """Raise ``ForbiddenError`` unless ``actor`` owns the resource or is an admin.

    Callers resolve the resource first, so a missing resource is reported as
    not found before ownership is considered.
    """
    if actor.is_admin or actor.id == owner_id:
        return
    raise ForbiddenError(message)
