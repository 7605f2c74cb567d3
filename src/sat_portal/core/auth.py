"""
Authentication and Authorization Module

Provides authentication dependencies for FastAPI endpoints. A bearer
JWT issued by the identity provider is decoded into a ``CurrentUser``,
which is then cached on the request's ``SessionContext``.
"""

import logging
from dataclasses import dataclass

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from sat_portal.core.security import decode_token
from sat_portal.modules.users.models import User, UserRole

logger = logging.getLogger(__name__)

# Security scheme for OpenAPI documentation
security = HTTPBearer(
    auto_error=False,
    description="JWT Bearer token for authentication",
)


@dataclass
class CurrentUser:
    """
    Identity of the signed-in user.

    Attributes:
        id: User's unique identifier
        name: Display name
        role: STUDENT or LECTURER
        identifier: NIM for students, NIP for lecturers ("-" if unknown)
        email: User's email address
    """

    id: str
    name: str
    role: UserRole
    identifier: str = "-"
    email: str | None = None

    @classmethod
    def from_model(cls, user: User) -> "CurrentUser":
        return cls(
            id=str(user.id),
            name=user.display_name,
            role=user.role or UserRole.STUDENT,
            identifier=user.identifier or "-",
            email=user.email,
        )

    def claims(self) -> dict[str, str]:
        """Token claims that let the user be rebuilt without a database read."""
        return {
            "name": self.name,
            "role": self.role.value,
            "identifier": self.identifier,
            "email": self.email or "",
        }

    def __str__(self) -> str:
        return f"CurrentUser(id={self.id}, name={self.name}, role={self.role.value})"


class SessionContext:
    """
    Per-request session state.

    Holds at most one signed-in user; it is created fresh for every request
    (or every client session) and never shared.
    """

    def __init__(self, user: CurrentUser | None = None):
        self.user = user

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    def set_user(self, user: CurrentUser) -> None:
        self.user = user

    def clear(self) -> None:
        self.user = None


def _unauthorized(error: str, message: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={"error": error, "message": message},
        headers={"WWW-Authenticate": "Bearer"},
    )


def user_from_token(token: str) -> CurrentUser:
    """
    Validate an access token and build the user from its claims.

    Raises:
        HTTPException 401: If the token is invalid, expired, or not an access token
    """
    payload = decode_token(token)
    if payload is None:
        logger.warning("Invalid or expired JWT token")
        raise _unauthorized("INVALID_TOKEN", "Invalid or expired authentication token.")

    token_type = payload.get("type", "access")
    if token_type != "access":
        logger.warning(f"Invalid token type: {token_type}")
        raise _unauthorized("INVALID_TOKEN_TYPE", "This endpoint requires an access token.")

    try:
        user_id = payload.get("sub")
        if not user_id:
            raise ValueError("Missing 'sub' claim in token")
        return CurrentUser(
            id=user_id,
            name=payload.get("name") or "User",
            role=UserRole(payload.get("role") or UserRole.STUDENT.value),
            identifier=payload.get("identifier") or "-",
            email=payload.get("email") or None,
        )
    except ValueError as e:
        logger.warning(f"Invalid token claims: {e}")
        raise _unauthorized(
            "INVALID_TOKEN_CLAIMS", "Token contains invalid or missing claims."
        ) from e


async def get_session_context(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> SessionContext:
    """
    FastAPI dependency returning the request's session context.

    The context is empty when no bearer token was sent.
    """
    context = getattr(request.state, "session_context", None)
    if context is None:
        context = SessionContext()
        if credentials:
            context.set_user(user_from_token(credentials.credentials))
        request.state.session_context = context
    return context


async def get_current_user(
    context: SessionContext = Depends(get_session_context),
) -> CurrentUser:
    """
    FastAPI dependency that requires a signed-in user.

    Raises:
        HTTPException 401: If no valid token was provided
    """
    if context.user is None:
        raise _unauthorized("NOT_AUTHENTICATED", "Authentication is required.")
    return context.user


def _require_role(role: UserRole):
    async def dependency(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if user.role != role:
            logger.warning(
                f"Access denied: User {user.id} has role '{user.role.value}', "
                f"but '{role.value}' is required"
            )
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail={
                    "error": f"{role.value}_ACCESS_REQUIRED",
                    "message": f"{role.value.title()} access is required for this endpoint.",
                },
            )
        return user

    return dependency


require_student = _require_role(UserRole.STUDENT)
require_lecturer = _require_role(UserRole.LECTURER)


__all__ = [
    "CurrentUser",
    "SessionContext",
    "get_session_context",
    "get_current_user",
    "require_student",
    "require_lecturer",
    "user_from_token",
]
