"""FastAPI dependencies for authentication, authorization and services."""

from collections.abc import Callable
from typing import Annotated

from fastapi import Cookie, Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from src.database import get_db
from src.errors import AuthenticationError, AuthorizationError
from src.models.enums import Role
from src.models.user import User
from src.services.auth import InvalidTokenError, decode_access_token, get_user_by_id
from src.services.bootcamp_service import BootcampService

NOT_AUTHORIZED = "Not authorized to access this route"

security = HTTPBearer(auto_error=False)


def get_token(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    token: Annotated[str | None, Cookie()] = None,
) -> str | None:
    """Extract the bearer token: Authorization header first, then the token cookie."""
    if credentials is not None and credentials.credentials:
        return credentials.credentials
    return token or None


def get_current_user(
    token: Annotated[str | None, Depends(get_token)],
    db: Annotated[Session, Depends(get_db)],
) -> User:
    """Get the current authenticated user from JWT token.

    Every failure (no token, bad signature, expired, unknown user) produces
    the same 401 so callers cannot tell which check failed.
    """
    if not token:
        raise AuthenticationError(NOT_AUTHORIZED)

    try:
        user_id = decode_access_token(token)
    except InvalidTokenError:
        raise AuthenticationError(NOT_AUTHORIZED) from None

    user = get_user_by_id(db, user_id)
    if user is None:
        raise AuthenticationError(NOT_AUTHORIZED)

    return user


def require_roles(*roles: Role) -> Callable[[User], User]:
    """Build a dependency that only lets the given roles through.

    The returned dependency takes the authenticated user as a parameter, so
    it always runs after get_current_user.
    """
    allowed = {role.value for role in roles}

    def role_checker(current_user: Annotated[User, Depends(get_current_user)]) -> User:
        if current_user.role not in allowed:
            raise AuthorizationError(
                f"User role {current_user.role} is not authorized to access this route"
            )
        return current_user

    return role_checker


def ensure_owner_or_admin(owner_id: int, user: User, action: str) -> None:
    """Raise unless the user owns the resource or is an admin."""
    if owner_id != user.id and not user.is_admin:
        raise AuthorizationError(f"User {user.id} is not authorized to {action}")


def get_bootcamp_service(
    db: Annotated[Session, Depends(get_db)],
) -> BootcampService:
    """Get bootcamp service with dependencies."""
    return BootcampService(db)
