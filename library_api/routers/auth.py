"""
Authentication Router

Handles user authentication endpoints:
- Registration and login (email/password -> session token)
- Current user profile (read and update)
- Password change
- Logout (advisory: tokens are stateless)
- Google OAuth login and callback

Security:
=========
- Passwords are hashed with bcrypt before storage and never logged
- Responses expose the public user view only (no hash, no Google id)
- Tokens expire after ACCESS_TOKEN_EXPIRE_MINUTES (7 days by default) and
  cannot be revoked; logging out means discarding the token client-side
- Register and login are rate limited per client IP
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Request, status
from starlette.responses import RedirectResponse

from library_api.dependencies import AppSettings, DbSession, Hasher, Tokens
from library_api.exceptions import OAuthError
from library_api.pipeline import RequestContext, RequestPipeline
from library_api.schemas import (
    AuthEnvelope,
    LoginRequest,
    MessageEnvelope,
    PasswordChange,
    UserEnvelope,
    UserResponse,
)
from library_api.services import identity, oauth
from library_api.services.rate_limiter import auth_limit, limiter
from library_api.validation import Mode, ResourceKind, get_ruleset

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/auth",
    tags=["Authentication"],
    responses={
        401: {"description": "Missing, invalid or expired token"},
    },
)

register_pipeline = RequestPipeline(body=get_ruleset(ResourceKind.USER, Mode.CREATE))
login_pipeline = RequestPipeline(body=LoginRequest)
me_pipeline = RequestPipeline(protected=True)
profile_pipeline = RequestPipeline(
    body=get_ruleset(ResourceKind.USER, Mode.UPDATE), protected=True
)
password_pipeline = RequestPipeline(body=PasswordChange, protected=True)
google_pipeline = RequestPipeline()


# =============================================================================
# Email / Password
# =============================================================================
@router.post(
    "/register",
    response_model=AuthEnvelope,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
    responses={409: {"description": "Email already registered"}},
)
@limiter.limit(auth_limit)
def register(
    request: Request,
    db: DbSession,
    hasher: Hasher,
    tokens: Tokens,
    ctx: Annotated[RequestContext, Depends(register_pipeline)],
) -> AuthEnvelope:
    """
    Create an account and log it in.

    Body: name, email, password, confirmPassword.
    """
    user = identity.register_user(db, hasher, ctx.body)
    return AuthEnvelope(
        message="User registered successfully",
        token=tokens.create_access_token(user.id),
        user=UserResponse.model_validate(user),
    )


@router.post(
    "/login",
    response_model=AuthEnvelope,
    summary="Login with email and password",
)
@limiter.limit(auth_limit)
def login(
    request: Request,
    db: DbSession,
    hasher: Hasher,
    tokens: Tokens,
    ctx: Annotated[RequestContext, Depends(login_pipeline)],
) -> AuthEnvelope:
    """
    Exchange an e-mail/password pair for a session token.

    Returns 401 "Invalid email or password" for unknown e-mails and wrong
    passwords alike, and 401 for deactivated accounts.
    """
    user = identity.authenticate_credentials(db, hasher, ctx.body.email, ctx.body.password)
    return AuthEnvelope(
        message="Login successful",
        token=tokens.create_access_token(user.id),
        user=UserResponse.model_validate(user),
    )


# =============================================================================
# Current User
# =============================================================================
@router.get(
    "/me",
    response_model=UserEnvelope,
    summary="Get current user",
)
def get_me(ctx: Annotated[RequestContext, Depends(me_pipeline)]) -> UserEnvelope:
    return UserEnvelope(
        message="Profile retrieved successfully",
        user=UserResponse.model_validate(ctx.user),
    )


@router.put(
    "/me",
    response_model=UserEnvelope,
    summary="Update current user",
    responses={409: {"description": "Email already in use"}},
)
def update_me(
    db: DbSession,
    ctx: Annotated[RequestContext, Depends(profile_pipeline)],
) -> UserEnvelope:
    user = identity.update_profile(db, ctx.user, ctx.body)
    return UserEnvelope(
        message="Profile updated successfully",
        user=UserResponse.model_validate(user),
    )


@router.put(
    "/change-password",
    response_model=MessageEnvelope,
    summary="Change password",
)
def change_password(
    db: DbSession,
    hasher: Hasher,
    ctx: Annotated[RequestContext, Depends(password_pipeline)],
) -> MessageEnvelope:
    """
    Change the current user's password.

    Body: currentPassword, newPassword, confirmNewPassword. Existing tokens
    keep working until they expire.
    """
    identity.change_password(db, hasher, ctx.user, ctx.body)
    return MessageEnvelope(message="Password changed successfully")


@router.post(
    "/logout",
    response_model=MessageEnvelope,
    summary="Logout",
)
def logout(ctx: Annotated[RequestContext, Depends(me_pipeline)]) -> MessageEnvelope:
    """
    Acknowledge a logout.

    Nothing is invalidated server-side; the client must drop its token.
    """
    logger.info(f"User logged out: {ctx.user.email}")
    return MessageEnvelope(
        message="Logout successful. Please remove the token from your client."
    )


# =============================================================================
# Google OAuth
# =============================================================================
@router.get(
    "/google",
    summary="Login with Google",
    responses={
        307: {"description": "Redirect to Google"},
        501: {"description": "Google OAuth not configured"},
    },
)
async def google_login(
    settings: AppSettings,
    ctx: Annotated[RequestContext, Depends(google_pipeline)],
) -> RedirectResponse:
    """Redirect the browser to Google's consent page."""
    auth_url = await oauth.get_google_auth_url(settings)
    return RedirectResponse(url=auth_url)


@router.get(
    "/google/callback",
    response_model=AuthEnvelope,
    summary="Google OAuth callback",
    responses={
        400: {"description": "Missing code or provider error"},
        501: {"description": "Google OAuth not configured"},
    },
)
async def google_callback(
    settings: AppSettings,
    db: DbSession,
    tokens: Tokens,
    ctx: Annotated[RequestContext, Depends(google_pipeline)],
    code: str | None = None,
    error: str | None = None,
) -> AuthEnvelope:
    """
    Finish the Google login.

    1. Exchange the authorization code for the Google profile
    2. Find the user by Google id, else link by e-mail, else create one
    3. Issue a session token
    """
    oauth.ensure_google_configured(settings)

    if error:
        raise OAuthError(f"Google sign-in was cancelled or failed: {error}")
    if not code:
        raise OAuthError("Authorization code is missing")

    profile = await oauth.fetch_google_user(code, settings)
    user = identity.resolve_oauth_user(db, profile)

    return AuthEnvelope(
        message="Google OAuth login successful",
        token=tokens.create_access_token(user.id),
        user=UserResponse.model_validate(user),
    )
