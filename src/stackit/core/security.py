"""JWT helpers shared by the authentication dependency and developer tooling."""
from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Any

from jose import JWTError, jwt

from stackit.core.errors import UnauthorizedError
from stackit.core.settings import settings


def create_access_token(user_id: int, expires_delta: timedelta | None = None) -> str:
    """Mint a bearer token whose subject is the user's id.

    Session issuance is handled outside this service; this helper exists for
    tests and the ``issue_token`` script.
    """
    expire = datetime.now(UTC) + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    to_encode: dict[str, Any] = {"sub": str(user_id), "exp": expire}
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> int:
    """Return the user id carried by a bearer token.

    Raises:
        UnauthorizedError: If the token is malformed, expired or has no subject.
    """
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError as err:
        raise UnauthorizedError() from err

    subject = payload.get("sub")
    if subject is None:
        raise UnauthorizedError()
    try:
        return int(subject)
    except (TypeError, ValueError) as err:
        raise UnauthorizedError() from err
