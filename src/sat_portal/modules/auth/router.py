"""
Authentication Router

Endpoints:
- POST /auth/login - Password sign-in
- POST /auth/register - Create an account and sign in
- GET /auth/oauth/google/url - Google authorization URL
- POST /auth/oauth/google - Complete Google sign-in
- POST /auth/logout - Sign out
- GET /auth/me - Current user
"""

import logging

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from sat_portal.core.auth import (
    CurrentUser,
    SessionContext,
    get_current_user,
    get_session_context,
)
from sat_portal.core.database import get_db
from sat_portal.core.exceptions import PortalError, to_http_exception
from sat_portal.modules.auth.google import GoogleOAuthProvider
from sat_portal.modules.auth.provider import IdentityProvider, issue_tokens
from sat_portal.modules.auth.schemas import (
    LoginRequest,
    LoginResponse,
    OAuthCallbackRequest,
    OAuthUrlResponse,
    RegisterRequest,
    UserResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def get_oauth_provider() -> GoogleOAuthProvider:
    return GoogleOAuthProvider()


async def get_identity_provider(
    request: Request,
    db: AsyncSession = Depends(get_db),
    session: SessionContext = Depends(get_session_context),
    oauth: GoogleOAuthProvider = Depends(get_oauth_provider),
) -> IdentityProvider:
    """Identity provider bound to this request's session and the app's listeners."""
    listeners = getattr(request.app.state, "identity_listeners", ())
    return IdentityProvider(db, session, listeners=listeners, oauth=oauth)


def _user_response(user: CurrentUser) -> UserResponse:
    return UserResponse(
        id=user.id,
        name=user.name,
        role=user.role,
        identifier=user.identifier,
        email=user.email,
    )


def _login_response(user: CurrentUser) -> LoginResponse:
    tokens = issue_tokens(user)
    return LoginResponse(
        access_token=tokens.access_token,
        refresh_token=tokens.refresh_token,
        user=_user_response(user),
    )


@router.post("/login", response_model=LoginResponse)
async def login(
    credentials: LoginRequest,
    provider: IdentityProvider = Depends(get_identity_provider),
) -> LoginResponse:
    """
    Authenticate user and return JWT tokens.

    Raises:
        HTTPException 401: Invalid credentials or inactive account
    """
    try:
        user = await provider.login_with_password(credentials.email, credentials.password)
    except PortalError as e:
        raise to_http_exception(e) from e
    return _login_response(user)


@router.post("/register", response_model=LoginResponse, status_code=status.HTTP_201_CREATED)
async def register(
    data: RegisterRequest,
    provider: IdentityProvider = Depends(get_identity_provider),
) -> LoginResponse:
    """Create a student or lecturer account and sign it in."""
    try:
        user = await provider.register(
            data.email, data.password, data.full_name, data.role, data.identifier
        )
    except PortalError as e:
        raise to_http_exception(e) from e
    return _login_response(user)


@router.get("/oauth/google/url", response_model=OAuthUrlResponse)
async def google_authorization_url(
    state: str | None = None,
    oauth: GoogleOAuthProvider = Depends(get_oauth_provider),
) -> OAuthUrlResponse:
    """URL the client redirects to for Google sign-in."""
    return OAuthUrlResponse(authorization_url=oauth.get_authorization_url(state))


@router.post("/oauth/google", response_model=LoginResponse)
async def google_callback(
    data: OAuthCallbackRequest,
    provider: IdentityProvider = Depends(get_identity_provider),
) -> LoginResponse:
    """Exchange a Google authorization code for portal tokens."""
    try:
        user = await provider.login_with_oauth(data.code)
    except PortalError as e:
        raise to_http_exception(e) from e
    return _login_response(user)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(provider: IdentityProvider = Depends(get_identity_provider)) -> None:
    """
    Sign out.

    Tokens are stateless; clients discard them. The sign-out event is still
    emitted so the host application can react.
    """
    await provider.logout()


@router.get("/me", response_model=UserResponse)
async def me(user: CurrentUser = Depends(get_current_user)) -> UserResponse:
    """The signed-in user."""
    return _user_response(user)
