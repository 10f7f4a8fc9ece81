"""
Identity Service

Everything that ties a request to a User:

- authenticate_token(): bearer token -> active User (used by the pipeline)
- register_user() / authenticate_credentials(): e-mail/password flows
- resolve_oauth_user(): Google profile -> User (find, link or create)
- update_profile() / change_password(): self-service account changes

All failures are raised as library_api.exceptions errors; the handlers
never build error responses themselves.
"""

import logging
from datetime import UTC, datetime

from sqlalchemy import select
from sqlalchemy.orm import Session

from library_api.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    ValidationError,
)
from library_api.models.user import User
from library_api.schemas.user import PasswordChange, ProfileUpdate, RegisterRequest
from library_api.services.oauth import OAuthUserData
from library_api.services.persistence import commit_or_conflict
from library_api.services.security import PasswordHasher, TokenService

logger = logging.getLogger(__name__)

EMAIL_TAKEN = "User already exists with this email address"
INVALID_CREDENTIALS = "Invalid email or password"


def ensure_credential(user: User) -> None:
    """A user must keep a password hash, a Google id, or both."""
    if not user.hashed_password and not user.google_id:
        raise ValidationError(
            errors=[{"field": "password", "message": "Password is required"}]
        )


def ensure_active(user: User) -> None:
    if not user.is_active:
        logger.warning(f"Rejected deactivated user: {user.email}")
        raise AuthorizationError()


def get_user_by_email(db: Session, email: str) -> User | None:
    return db.scalar(select(User).where(User.email == email.lower()))


# =============================================================================
# Token Authentication
# =============================================================================
def authenticate_token(db: Session, tokens: TokenService, token: str | None) -> User:
    """
    Resolve a bearer token to an active user.

    Raises:
        AuthenticationError: No token, bad/expired token, or unknown user
        AuthorizationError: The user is deactivated
    """
    if not token:
        raise AuthenticationError("Access denied. No token provided.")

    try:
        user_id = tokens.get_user_id(token)
    except AuthenticationError as exc:
        logger.warning(f"Token rejected: {exc.message}")
        raise

    user = db.get(User, user_id)
    if user is None:
        logger.warning(f"Token references unknown user id {user_id}")
        raise AuthenticationError("User not found")

    ensure_active(user)
    return user


# =============================================================================
# Password Flows
# =============================================================================
def register_user(db: Session, hasher: PasswordHasher, data: RegisterRequest) -> User:
    """
    Create a password user.

    confirmPassword has already been checked by the ruleset and is dropped.

    Raises:
        ConflictError: If the e-mail is already registered
    """
    if get_user_by_email(db, data.email):
        raise ConflictError(EMAIL_TAKEN)

    user = User(
        email=data.email,
        name=data.name,
        hashed_password=hasher.hash(data.password),
        last_login_at=datetime.now(UTC),
    )
    ensure_credential(user)

    with commit_or_conflict(db, EMAIL_TAKEN):
        db.add(user)
    db.refresh(user)

    logger.info(f"New user registered: {user.email}")
    return user


def authenticate_credentials(
    db: Session,
    hasher: PasswordHasher,
    email: str,
    password: str,
) -> User:
    """
    Check an e-mail/password pair and record the login.

    Unknown e-mail, wrong password and Google-only accounts all get the
    same message so the endpoint does not reveal which accounts exist.
    """
    user = get_user_by_email(db, email)
    if user is None or not hasher.verify(password, user.hashed_password):
        logger.warning(f"Failed login attempt for: {email}")
        raise AuthenticationError(INVALID_CREDENTIALS)

    ensure_active(user)

    user.last_login_at = datetime.now(UTC)
    db.commit()
    db.refresh(user)

    logger.info(f"User logged in: {user.email}")
    return user


# =============================================================================
# OAuth
# =============================================================================
def resolve_oauth_user(db: Session, profile: OAuthUserData) -> User:
    """
    Find, link or create the user for a Google profile.

    Lookup order:
    1. A user already linked to this Google id
    2. A user with the same e-mail: link the Google id (and avatar if the
       account has none); the password, if any, is kept
    3. Otherwise create a passwordless user

    Raises:
        AuthorizationError: If the resolved user is deactivated
    """
    user = db.scalar(select(User).where(User.google_id == profile.provider_user_id))

    if user is None:
        user = get_user_by_email(db, profile.email)
        if user is not None:
            logger.info(f"Linking Google account to existing user: {user.email}")
            user.google_id = profile.provider_user_id
            if not user.avatar_url:
                user.avatar_url = profile.avatar_url
        else:
            logger.info(f"Creating user from Google profile: {profile.email}")
            user = User(
                email=profile.email,
                name=profile.name,
                google_id=profile.provider_user_id,
                avatar_url=profile.avatar_url,
                is_active=True,
            )
            db.add(user)

    ensure_active(user)
    ensure_credential(user)

    user.last_login_at = datetime.now(UTC)
    with commit_or_conflict(db, EMAIL_TAKEN):
        db.flush()
    db.refresh(user)
    return user


# =============================================================================
# Account Changes
# =============================================================================
def update_profile(db: Session, user: User, data: ProfileUpdate) -> User:
    """
    Apply a profile update.

    Raises:
        ConflictError: If the new e-mail belongs to another user
    """
    changes = data.model_dump(exclude_unset=True)

    new_email = changes.get("email")
    if new_email and new_email != user.email:
        other = get_user_by_email(db, new_email)
        if other is not None and other.id != user.id:
            raise ConflictError("Email address is already in use")

    for field, value in changes.items():
        setattr(user, field, value)

    with commit_or_conflict(db, "Email address is already in use"):
        db.flush()
    db.refresh(user)
    return user


def change_password(
    db: Session,
    hasher: PasswordHasher,
    user: User,
    data: PasswordChange,
) -> None:
    """
    Replace the user's password after verifying the current one.

    Tokens issued before the change stay valid until they expire.

    Raises:
        AuthenticationError: If the current password is wrong (or the
            account has no password)
    """
    if not hasher.verify(data.current_password, user.hashed_password):
        logger.warning(f"Password change rejected for: {user.email}")
        raise AuthenticationError("Current password is incorrect")

    user.hashed_password = hasher.hash(data.new_password)
    db.commit()
    logger.info(f"Password changed for: {user.email}")
