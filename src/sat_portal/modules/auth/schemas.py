"""Authentication schemas."""

from pydantic import BaseModel, EmailStr, Field

from sat_portal.modules.users.models import UserRole


class LoginRequest(BaseModel):
    """Login request schema."""

    email: EmailStr
    password: str


class RegisterRequest(BaseModel):
    """Registration request schema."""

    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)
    full_name: str = Field(..., min_length=1, max_length=200)
    role: UserRole = UserRole.STUDENT
    identifier: str | None = Field(None, max_length=50, description="NIM or NIP")


class OAuthCallbackRequest(BaseModel):
    """Authorization code returned by Google."""

    code: str = Field(..., min_length=1)


class OAuthUrlResponse(BaseModel):
    authorization_url: str


class UserResponse(BaseModel):
    """Signed-in user."""

    id: str
    name: str
    role: UserRole
    identifier: str
    email: str | None = None


class LoginResponse(BaseModel):
    """Login response schema."""

    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    user: UserResponse
