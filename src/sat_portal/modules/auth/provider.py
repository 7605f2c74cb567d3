"""
Session/Identity Provider

Exposes the signed-in user and the sign-in / sign-out operations. The
provider works on an explicit ``SessionContext`` handed to it by the
caller, so two sessions never share a cached user.

Listeners are notified with ``IdentityEvent.SIGNED_IN`` after every
successful sign-in or registration and ``IdentityEvent.SIGNED_OUT``
after logout.
"""

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import Enum

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from sat_portal.core.auth import CurrentUser, SessionContext
from sat_portal.core.exceptions import AuthenticationError, ValidationError
from sat_portal.core.security import (
    create_access_token,
    create_refresh_token,
    hash_password,
    verify_password,
)
from sat_portal.modules.auth.google import GoogleOAuthProvider
from sat_portal.modules.users.models import User, UserRole
from sat_portal.modules.users.repository import UserRepository

logger = logging.getLogger(__name__)


class IdentityEvent(str, Enum):
    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"


IdentityListener = Callable[[IdentityEvent, CurrentUser | None], None]


@dataclass
class IssuedTokens:
    access_token: str
    refresh_token: str


def issue_tokens(user: CurrentUser) -> IssuedTokens:
    """Access and refresh tokens for a signed-in user."""
    return IssuedTokens(
        access_token=create_access_token(subject=user.id, additional_claims=user.claims()),
        refresh_token=create_refresh_token(subject=user.id),
    )


class IdentityProvider:
    """Sign-in, registration and sign-out against the portal's user store."""

    def __init__(
        self,
        db: AsyncSession,
        session: SessionContext,
        listeners: Iterable[IdentityListener] = (),
        oauth: GoogleOAuthProvider | None = None,
    ):
        self.db = db
        self.session = session
        self._listeners: list[IdentityListener] = list(listeners)
        self._oauth = oauth

    def subscribe(self, listener: IdentityListener) -> Callable[[], None]:
        """Register a listener; the returned callable removes it again."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _emit(self, event: IdentityEvent, user: CurrentUser | None) -> None:
        for listener in list(self._listeners):
            try:
                listener(event, user)
            except Exception:
                logger.exception(f"Identity listener failed on {event.value}")

    def _sign_in(self, user: User) -> CurrentUser:
        if not user.is_active:
            logger.warning(f"Login attempt for inactive account: {user.email}")
            raise AuthenticationError("Your account has been deactivated.")
        current = CurrentUser.from_model(user)
        self.session.set_user(current)
        logger.info(f"User signed in: {user.email} (role: {current.role.value})")
        self._emit(IdentityEvent.SIGNED_IN, current)
        return current

    async def current_user(self) -> CurrentUser | None:
        """The signed-in user of this session, or None."""
        return self.session.user

    async def login(self, role: UserRole) -> CurrentUser:
        """
        Resume the session's sign-in for ``role``.

        Raises:
            AuthenticationError: If nobody is signed in with that role; the
                caller should use password or OAuth sign-in instead
        """
        user = self.session.user
        if user is None or user.role != role:
            raise AuthenticationError(
                "Not signed in. Use password or Google sign-in."
            )
        return user

    async def login_with_password(self, email: str, password: str) -> CurrentUser:
        """
        Sign in with e-mail and password.

        Raises:
            AuthenticationError: Invalid credentials or inactive account
        """
        user = await UserRepository.get_by_email(self.db, email.lower())
        if user is None or not verify_password(password, user.password_hash):
            logger.warning(f"Failed password login for: {email}")
            raise AuthenticationError("Invalid email or password.")
        return self._sign_in(user)

    async def login_with_oauth(self, code: str) -> CurrentUser:
        """
        Sign in with a Google authorization code.

        New Google accounts are registered as students; an existing account
        with the same e-mail gets the Google account linked.

        Raises:
            AuthenticationError: If OAuth is not configured or Google rejects the code
        """
        if self._oauth is None or not self._oauth.is_configured:
            raise AuthenticationError("Google sign-in is not configured.")

        info = await self._oauth.authenticate(code)
        if not info or not info.get("google_id") or not info.get("email"):
            raise AuthenticationError("Google sign-in failed.")

        user = await UserRepository.get_by_google_id(self.db, info["google_id"])
        if user is None:
            email = info["email"].lower()
            user = await UserRepository.get_by_email(self.db, email)
            if user is not None:
                user = await UserRepository.link_google_account(self.db, user, info["google_id"])
            else:
                user = await UserRepository.create(
                    self.db,
                    email=email,
                    password_hash=None,
                    full_name=info.get("full_name") or None,
                    role=UserRole.STUDENT,
                    google_id=info["google_id"],
                )
        return self._sign_in(user)

    async def register(
        self,
        email: str,
        password: str,
        full_name: str | None,
        role: UserRole = UserRole.STUDENT,
        identifier: str | None = None,
    ) -> CurrentUser:
        """
        Create an account and sign it in.

        Raises:
            ValidationError: If the e-mail is already registered
        """
        email = email.lower()
        if await UserRepository.email_exists(self.db, email):
            raise ValidationError("Email sudah terdaftar.", missing_fields=["email"])
        try:
            user = await UserRepository.create(
                self.db,
                email=email,
                password_hash=hash_password(password),
                full_name=full_name,
                role=role,
                identifier=identifier,
            )
        except IntegrityError as e:
            await self.db.rollback()
            raise ValidationError("Email sudah terdaftar.", missing_fields=["email"]) from e
        return self._sign_in(user)

    async def logout(self) -> None:
        """Clear the session's user. Signing out twice is harmless."""
        user = self.session.user
        self.session.clear()
        if user is not None:
            logger.info(f"User signed out: {user.id}")
        self._emit(IdentityEvent.SIGNED_OUT, user)
