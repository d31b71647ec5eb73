"""Shared API dependencies for authentication and common functionality."""

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from stackit.core.errors import ForbiddenError, UnauthorizedError
from stackit.core.security import decode_access_token
from stackit.db.session import get_db
from stackit.models import User

# HTTP Bearer scheme for JWT authentication; missing credentials are reported
# by get_current_user so the error body stays structured.
bearer_scheme = HTTPBearer(auto_error=False)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]
CredentialsDep = Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)]


def _resolve_user(db: Session, token: str) -> User:
    user_id = decode_access_token(token)
    user = db.get(User, user_id)
    if user is None:
        raise UnauthorizedError("User not found")
    return user


def get_current_user(credentials: CredentialsDep, db: SessionDep) -> User:
    """Get the current authenticated user from the bearer token.

    Args:
        credentials: HTTP Bearer token credentials, if any
        db: Database session

    Returns:
        User object for the authenticated user

    Raises:
        UnauthorizedError: If the token is missing or invalid, or the user is gone
    """
    if credentials is None or not credentials.credentials.strip():
        raise UnauthorizedError("Access token required")
    return _resolve_user(db, credentials.credentials)


def get_optional_user(credentials: CredentialsDep, db: SessionDep) -> User | None:
    """Return the caller when a valid token is sent, ``None`` otherwise.

    Used by public reads that annotate results with the caller's votes.
    """
    if credentials is None or not credentials.credentials.strip():
        return None
    try:
        return _resolve_user(db, credentials.credentials)
    except UnauthorizedError:
        return None


def get_admin_user(current_user: Annotated[User, Depends(get_current_user)]) -> User:
    """Require the authenticated caller to be an admin."""
    if not current_user.is_admin:
        raise ForbiddenError("Insufficient permissions")
    return current_user


# Type aliases for user dependencies
CurrentUserDep = Annotated[User, Depends(get_current_user)]
OptionalUserDep = Annotated[User | None, Depends(get_optional_user)]
AdminUserDep = Annotated[User, Depends(get_admin_user)]
