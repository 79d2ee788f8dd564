"""
Auth gateway: the single entry point to the identity store.

A gateway instance plays the role of an authenticated client: it holds the
current access token (if any), resolves it to a user and notifies listeners
when the signed-in identity changes.
"""

import logging
from typing import Callable

from jose import JWTError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from subsync.core.config import settings
from subsync.core.errors import AuthError
from subsync.core.security import (
    access_token_expiry,
    create_access_token,
    decode_token,
    hash_password,
    hash_reset_token,
    new_session_id,
    new_reset_token,
    reset_token_expiry,
    verify_password,
)
from subsync.integrations.mailer import MockMailer, get_mailer
from subsync.models.auth_session import AuthSession
from subsync.models.password_reset import PasswordReset
from subsync.models.user import User
from subsync.schemas.auth import SessionOut
from subsync.schemas.user import CurrentUser
from subsync.utils.dt import as_utc_aware, utcnow

logger = logging.getLogger(__name__)

AuthListener = Callable[[CurrentUser | None], None]

PROFILE_FIELDS = ("full_name", "phone", "address", "city", "state", "zip_code")


def _normalize_email(email: str) -> str:
    return email.strip().lower()


class AuthGateway:
    def __init__(self, db: Session, access_token: str | None = None):
        self.db = db
        self.access_token = access_token
        self._listeners: list[AuthListener] = []

    # ---------------------------
    # sign up / in / out
    # ---------------------------

    def _check_password_policy(self, password: str) -> None:
        if len(password) < settings.password_min_length:
            raise AuthError(
                f"Password must be at least {settings.password_min_length} characters",
                status_code=400,
            )

    def sign_up(self, email: str, password: str, full_name: str | None = None) -> User:
        email = _normalize_email(email)
        self._check_password_policy(password)

        existing = self.db.query(User).filter(User.email == email).first()
        if existing:
            raise AuthError("Email already registered", status_code=400)

        user = User(
            email=email,
            password_hash=hash_password(password),
            full_name=full_name,
            role="user",
        )
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError as exc:
            # lost a race against a concurrent sign-up with the same email
            self.db.rollback()
            raise AuthError("Email already registered", status_code=400) from exc

        self.db.refresh(user)
        logger.info("signed up user id=%s", user.id)
        return user

    def sign_in(self, email: str, password: str) -> SessionOut:
        user = self.db.query(User).filter(User.email == _normalize_email(email)).first()
        if not user or not verify_password(password, user.password_hash):
            raise AuthError("Invalid email or password", status_code=401)
        if not user.is_active:
            raise AuthError("Account is disabled", status_code=403)

        session_id = new_session_id()
        expires_at = access_token_expiry()
        self.db.add(AuthSession(id=session_id, user_id=user.id, expires_at=expires_at))
        user.last_login = utcnow()
        self.db.commit()

        self.access_token = create_access_token(str(user.id), session_id, expires_at)
        current = CurrentUser.model_validate(user)
        logger.info("signed in user id=%s session=%s", user.id, session_id)
        self._notify(current)

        return SessionOut(
            access_token=self.access_token,
            expires_in=settings.jwt_access_ttl_min * 60,
            expires_at=expires_at,
            user=current,
        )

    def sign_out(self) -> None:
        """Revoke the current session. Signing out without a session is a no-op."""
        token, self.access_token = self.access_token, None
        if not token:
            return

        session = self._lookup_session(token)
        if session is not None and session.revoked_at is None:
            session.revoked_at = utcnow()
            try:
                self.db.commit()
            except SQLAlchemyError as exc:
                self.db.rollback()
                raise AuthError("Sign-out failed", status_code=500) from exc
            logger.info("signed out session=%s", session.id)

        self._notify(None)

    # ---------------------------
    # session / identity
    # ---------------------------

    def _lookup_session(self, token: str) -> AuthSession | None:
        try:
            payload = decode_token(token)
        except JWTError:
            return None

        session_id = payload.get("jti")
        sub = payload.get("sub")
        if not session_id or not sub:
            return None

        session = self.db.get(AuthSession, session_id)
        if session is None or str(session.user_id) != str(sub):
            return None
        return session

    def get_session(self) -> AuthSession | None:
        if not self.access_token:
            return None
        session = self._lookup_session(self.access_token)
        if session is None or session.revoked_at is not None:
            return None
        if as_utc_aware(session.expires_at) <= utcnow():
            return None
        return session

    def get_current_user(self) -> CurrentUser | None:
        """
        Resolve the session to a user with role and profile.
        Any failure along the way counts as "not signed in".
        """
        try:
            session = self.get_session()
            if session is None:
                return None
            user = self.db.get(User, session.user_id)
            if user is None or not user.is_active:
                return None
            return CurrentUser.model_validate(user)
        except Exception:
            logger.warning("could not resolve current user, treating as signed out", exc_info=True)
            return None

    def is_admin(self) -> bool:
        user = self.get_current_user()
        return user is not None and user.role == "admin"

    def on_auth_state_change(self, callback: AuthListener) -> Callable[[], None]:
        self._listeners.append(callback)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def _notify(self, user: CurrentUser | None) -> None:
        for listener in list(self._listeners):
            listener(user)

    # ---------------------------
    # profile
    # ---------------------------

    def _require_user(self) -> User:
        current = self.get_current_user()
        if current is None:
            raise AuthError("No authenticated user")
        return self.db.get(User, current.id)

    def update_profile(self, **updates) -> User:
        user = self._require_user()
        for key, value in updates.items():
            if key not in PROFILE_FIELDS:
                raise AuthError(f"Field '{key}' cannot be changed here", status_code=400)
            setattr(user, key, value)
        self.db.commit()
        self.db.refresh(user)
        return user

    def update_password(self, new_password: str) -> None:
        user = self._require_user()
        self._check_password_policy(new_password)
        user.password_hash = hash_password(new_password)
        self.db.commit()
        logger.info("password updated for user id=%s", user.id)

    # ---------------------------
    # password reset
    # ---------------------------

    def reset_password(self, email: str, mailer: MockMailer | None = None) -> None:
        """
        Mail a single-use reset link if the account exists. The outcome is the
        same for unknown addresses, so callers cannot tell which addresses
        have accounts.
        """
        mailer = mailer or get_mailer()
        user = self.db.query(User).filter(User.email == _normalize_email(email)).first()
        if user is None or not user.is_active:
            logger.info("password reset requested for an unknown or disabled account")
            return

        token = new_reset_token()
        self.db.add(PasswordReset(user_id=user.id, token_hash=hash_reset_token(token), expires_at=reset_token_expiry()))
        try:
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise AuthError("Password reset failed", status_code=500) from exc

        link = f"{settings.app_base_url}/auth/reset-password?token={token}"
        mailer.send(
            user.email,
            "Reset your Lumen password",
            f"Use this link within {settings.password_reset_ttl_min} minutes to choose a new password: {link}",
        )
        logger.info("password reset issued for user id=%s", user.id)

    def confirm_password_reset(self, token: str, new_password: str) -> None:
        self._check_password_policy(new_password)

        reset = (
            self.db.query(PasswordReset)
            .filter(PasswordReset.token_hash == hash_reset_token(token))
            .first()
        )
        if reset is None or reset.used_at is not None or as_utc_aware(reset.expires_at) <= utcnow():
            raise AuthError("Reset link is invalid or has expired", status_code=400)
        user = self.db.get(User, reset.user_id)
        if user is None or not user.is_active:
            raise AuthError("Reset link is invalid or has expired", status_code=400)

        now = utcnow()
        user.password_hash = hash_password(new_password)
        reset.used_at = now
        # a reset signs the account out everywhere
        self.db.query(AuthSession).filter(
            AuthSession.user_id == user.id,
            AuthSession.revoked_at.is_(None),
        ).update({"revoked_at": now})
        self.db.commit()
        logger.info("password reset completed for user id=%s", user.id)
