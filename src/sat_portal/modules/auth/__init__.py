"""Authentication module."""

from sat_portal.modules.auth.provider import IdentityEvent, IdentityProvider
from sat_portal.modules.auth.router import router
from sat_portal.modules.auth.schemas import LoginRequest, LoginResponse

__all__ = ["router", "IdentityEvent", "IdentityProvider", "LoginRequest", "LoginResponse"]
