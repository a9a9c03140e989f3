"""
Authentication service for EstateIQ.

The sole authority over identities and sessions: creates password and Google
accounts, checks credentials, links Google identities to existing accounts,
and issues, verifies and deletes session tokens.

The service is handed an ORM session by the caller (normally the ``get_db``
dependency), so every operation runs against whatever store the caller chose.
Each public operation commits at most once.
"""

import re
from datetime import timedelta
from typing import Any, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from estateiq.config import settings, SESSION_DURATION_DAYS, MIN_PASSWORD_LENGTH
from estateiq.errors import AuthError, ConflictError, ValidationError
from estateiq.logging_config import get_logger
from estateiq.models.user import User
from estateiq.models.session import UserSession
from estateiq.utils.auth import (
    hash_password,
    verify_password,
    generate_session_token,
    decode_google_credential,
    verify_google_credential,
    extract_google_profile,
)
from estateiq.utils.dates import utcnow

logger = get_logger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

# Same message for unknown email, wrong password and Google-only accounts
INVALID_CREDENTIALS = "Invalid email or password"

# Compared against when the email is unknown so both failure paths cost a bcrypt check
_dummy_hash: Optional[str] = None


def normalize_email(email: str) -> str:
    return email.strip().lower()


def _token_preview(token: str) -> str:
    return token[:10] + "..."


def _dummy_password_hash() -> str:
    global _dummy_hash
    if _dummy_hash is None:
        _dummy_hash = hash_password("estateiq-dummy-password")
    return _dummy_hash


class AuthService:
    """Identity and session operations bound to one database session."""

    def __init__(self, db: Session, google_client_id: Optional[str] = None):
        self.db = db
        self.google_client_id = google_client_id if google_client_id is not None else settings.GOOGLE_CLIENT_ID

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def find_user_by_email(self, email: Any) -> Optional[User]:
        if not isinstance(email, str) or not email.strip():
            return None
        return self.db.query(User).filter(func.lower(User.email) == normalize_email(email)).first()

    def find_user_by_google_id(self, google_id: Any) -> Optional[User]:
        if not google_id:
            return None
        return self.db.query(User).filter(User.google_id == str(google_id)).first()

    # ------------------------------------------------------------------
    # Account creation
    # ------------------------------------------------------------------

    def create_user(
        self,
        first_name: str,
        last_name: str,
        email: str,
        password: str,
        phone: Optional[str] = None,
        company: Optional[str] = None,
    ) -> User:
        """
        Register a password-based account.

        Raises:
            ValidationError: missing names, malformed email or short password
            ConflictError: email already registered
        """
        first_name = first_name.strip() if isinstance(first_name, str) else first_name
        last_name = last_name.strip() if isinstance(last_name, str) else last_name
        if not first_name or not last_name or not email or not password:
            raise ValidationError("First name, last name, email, and password are required")
        if not isinstance(email, str) or not EMAIL_PATTERN.match(email.strip()):
            raise ValidationError("Please enter a valid email address")
        if not isinstance(password, str) or len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")

        email_norm = normalize_email(email)
        if self.find_user_by_email(email_norm) is not None:
            logger.warning(f"Registration failed - email already registered: {email_norm}")
            raise ConflictError("User with this email already exists")

        user = User(
            email=email_norm,
            password_hash=hash_password(password),
            first_name=first_name,
            last_name=last_name,
            phone=phone or None,
            company=company or None,
        )
        return self._insert_user(user)

    def create_google_user(
        self,
        google_id: str,
        email: str,
        first_name: str,
        last_name: str,
        avatar_url: Optional[str] = None,
    ) -> User:
        """
        Register an account that signs in only through Google (no password).

        Raises:
            ConflictError: email or Google id already registered
        """
        if not google_id or not email:
            raise ValidationError("Google id and email are required")

        email_norm = normalize_email(email)
        if self.find_user_by_email(email_norm) is not None:
            raise ConflictError("User with this email already exists")
        if self.find_user_by_google_id(google_id) is not None:
            raise ConflictError("This Google account is already registered")

        user = User(
            email=email_norm,
            password_hash=None,
            first_name=first_name or "User",
            last_name=last_name or "",
            google_id=str(google_id),
            avatar_url=avatar_url,
        )
        return self._insert_user(user)

    def _insert_user(self, user: User) -> User:
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError:
            # Lost a race with a concurrent registration for the same email/Google id
            self.db.rollback()
            logger.warning(f"Registration failed on unique constraint for {user.email}")
            raise ConflictError("User with this email already exists")
        self.db.refresh(user)
        logger.info(f"User created: {user.email} (ID: {user.id}, google={user.google_id is not None})")
        return user

    def update_google_user(self, user_id: str, google_id: str, avatar_url: Optional[str] = None) -> User:
        """
        Link a Google identity to an existing account.

        Relinking the Google id the account already has is a no-op.

        Raises:
            AuthError: no such user
            ConflictError: the account is linked to a different Google id, or
                the Google id belongs to another account
        """
        user = self.db.get(User, user_id)
        if user is None:
            raise AuthError("User not found")

        google_id = str(google_id)
        if user.google_id == google_id:
            return user
        if user.google_id:
            raise ConflictError("This account is linked to a different Google account")

        owner = self.find_user_by_google_id(google_id)
        if owner is not None and owner.id != user.id:
            raise ConflictError("This Google account is already registered")

        user.google_id = google_id
        if avatar_url:
            user.avatar_url = avatar_url
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ConflictError("This Google account is already registered")
        self.db.refresh(user)
        logger.info(f"Linked Google identity to user {user.email}")
        return user

    # ------------------------------------------------------------------
    # Sign-in flows
    # ------------------------------------------------------------------

    def sign_in(
        self,
        email: str,
        password: str,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> Tuple[User, str]:
        """
        Check an email/password pair and issue a session.

        Raises:
            ValidationError: email or password missing
            AuthError: unknown email, wrong password, or Google-only account
        """
        if not email or not password:
            raise ValidationError("Email and password are required")

        user = self.find_user_by_email(email)
        if user is None or not user.password_hash:
            verify_password(str(password), _dummy_password_hash())
            logger.warning("Sign-in failed - invalid credentials")
            raise AuthError(INVALID_CREDENTIALS)
        if not verify_password(str(password), user.password_hash):
            logger.warning("Sign-in failed - invalid credentials")
            raise AuthError(INVALID_CREDENTIALS)

        user.last_login = utcnow()
        token = self.create_session(user.id, ip_address=ip_address, user_agent=user_agent)
        logger.info(f"Sign-in successful for user: {user.email}")
        return user, token

    def authenticate_google(
        self,
        credential: Any,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> Tuple[User, str]:
        """
        Sign in with a Google identity token, creating or linking the account.

        Lookup order: Google id, then email. A matching password account with no
        Google id gets linked; an unknown identity gets a new Google-only account.

        Raises:
            ValidationError: no credential supplied
            TokenDecodeError: the credential could not be decoded or verified
            ConflictError: the email belongs to an account linked to another Google id
        """
        if not credential:
            raise ValidationError("Google credential is required")

        if self.google_client_id:
            claims = verify_google_credential(credential, self.google_client_id)
        else:
            logger.warning("GOOGLE_CLIENT_ID not set - accepting Google credential without signature verification")
            claims = decode_google_credential(credential)
        profile = extract_google_profile(claims)

        user = self.find_user_by_google_id(profile.google_id) or self.find_user_by_email(profile.email)
        if user is None:
            user = self.create_google_user(
                google_id=profile.google_id,
                email=profile.email,
                first_name=profile.first_name,
                last_name=profile.last_name,
                avatar_url=profile.avatar_url,
            )
        elif user.google_id != profile.google_id:
            user = self.update_google_user(user.id, profile.google_id, profile.avatar_url)

        user.last_login = utcnow()
        token = self.create_session(user.id, ip_address=ip_address, user_agent=user_agent)
        logger.info(f"Google auth successful for user: {user.email}")
        return user, token

    # ------------------------------------------------------------------
    # Sessions
    # ------------------------------------------------------------------

    def create_session(
        self,
        user_id: str,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> str:
        """
        Issue a new session token valid for SESSION_DURATION_DAYS.

        Any earlier sessions of the user are removed, so each user has at most
        one live session.
        """
        token = generate_session_token()
        now = utcnow()

        self.db.query(UserSession).filter(UserSession.user_id == user_id).delete(synchronize_session=False)
        self.db.add(UserSession(
            user_id=user_id,
            token=token,
            created_at=now,
            expires_at=now + timedelta(days=SESSION_DURATION_DAYS),
            ip_address=ip_address,
            user_agent=user_agent,
        ))
        self.db.commit()

        logger.info(f"Session created for user {user_id} with token {_token_preview(token)}")
        return token

    def verify_session(self, token: Any) -> Optional[User]:
        """
        Resolve a session token to its user.

        Returns None, never raises, for a missing, malformed, unknown or
        expired token. Store failures still propagate.
        """
        if not isinstance(token, str) or not token:
            return None

        session = self.db.query(UserSession).filter(UserSession.token == token).first()
        if session is None:
            logger.debug("No session found for token")
            return None
        if session.is_expired():
            logger.info(f"Session {_token_preview(token)} has expired")
            return None
        return session.user

    def sign_out(self, token: Any) -> None:
        if not isinstance(token, str) or not token:
            return
        deleted = self.db.query(UserSession).filter(UserSession.token == token).delete(synchronize_session=False)
        self.db.commit()
        if deleted:
            logger.info(f"Session {_token_preview(token)} signed out")
