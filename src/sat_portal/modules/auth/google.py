"""Google OAuth provider (authorization-code flow)."""

import logging
from typing import Any
from urllib.parse import urlencode

import httpx

from sat_portal.core.config import settings

logger = logging.getLogger(__name__)


class GoogleOAuthProvider:
    """Handle Google OAuth authentication."""

    GOOGLE_AUTH_URL = "https://accounts.google.com/o/oauth2/v2/auth"
    GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
    GOOGLE_USERINFO_URL = "https://www.googleapis.com/oauth2/v3/userinfo"

    def __init__(
        self,
        client_id: str | None = None,
        client_secret: str | None = None,
        redirect_uri: str | None = None,
    ):
        self.client_id = client_id or settings.google_client_id
        self.client_secret = client_secret or settings.google_client_secret
        self.redirect_uri = redirect_uri or settings.google_redirect_uri

    @property
    def is_configured(self) -> bool:
        return bool(self.client_id and self.client_secret)

    def get_authorization_url(self, state: str | None = None) -> str:
        """Generate Google OAuth authorization URL."""
        params = {
            "client_id": self.client_id,
            "redirect_uri": self.redirect_uri,
            "response_type": "code",
            "scope": "openid email profile",
            "access_type": "online",
            "prompt": "select_account",
        }
        if state:
            params["state"] = state
        return f"{self.GOOGLE_AUTH_URL}?{urlencode(params)}"

    async def exchange_code_for_tokens(self, code: str) -> dict[str, Any]:
        """Exchange authorization code for access tokens."""
        async with httpx.AsyncClient(timeout=10.0) as client:
            response = await client.post(
                self.GOOGLE_TOKEN_URL,
                data={
                    "client_id": self.client_id,
                    "client_secret": self.client_secret,
                    "code": code,
                    "grant_type": "authorization_code",
                    "redirect_uri": self.redirect_uri,
                },
            )
            response.raise_for_status()
            return response.json()

    async def get_user_info(self, access_token: str) -> dict[str, Any]:
        """Get user information from Google."""
        async with httpx.AsyncClient(timeout=10.0) as client:
            response = await client.get(
                self.GOOGLE_USERINFO_URL,
                headers={"Authorization": f"Bearer {access_token}"},
            )
            response.raise_for_status()
            return response.json()

    async def authenticate(self, code: str) -> dict[str, Any] | None:
        """
        Complete OAuth flow: exchange code and get user info.

        Returns user data if successful, None otherwise.
        """
        try:
            tokens = await self.exchange_code_for_tokens(code)
            access_token = tokens.get("access_token")
            if not access_token:
                logger.error("[GoogleOAuth] No access token received from token exchange")
                return None

            user_info = await self.get_user_info(access_token)
        except httpx.HTTPStatusError as e:
            logger.error(
                f"[GoogleOAuth] HTTP error during authentication: "
                f"{e.response.status_code} - {e.response.text}"
            )
            return None
        except httpx.RequestError as e:
            logger.error(f"[GoogleOAuth] Request error during authentication: {e}")
            return None

        return {
            "google_id": user_info.get("sub"),
            "email": user_info.get("email"),
            "email_verified": user_info.get("email_verified", False),
            "full_name": user_info.get("name", ""),
        }
