"""
OAuth Service

Google sign-in, used as an alternative to e-mail/password login.

This service:
1. Builds the Google authorization URL the client is redirected to
2. Exchanges the callback's authorization code for an access token
3. Fetches the Google profile and normalizes it

Linking the profile to a local user is done by
services.identity.resolve_oauth_user().

Both steps use authlib's AsyncOAuth2Client, which runs on httpx. Tests
patch fetch_google_user() instead of calling Google.
"""

import logging
from dataclasses import dataclass

import httpx
from authlib.common.errors import AuthlibBaseError
from authlib.integrations.httpx_client import AsyncOAuth2Client

from library_api.config import Settings
from library_api.exceptions import OAuthError, ProviderNotConfiguredError

logger = logging.getLogger(__name__)

GOOGLE_AUTHORIZE_URL = "https://accounts.google.com/o/oauth2/v2/auth"
GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
GOOGLE_USERINFO_URL = "https://www.googleapis.com/oauth2/v2/userinfo"
GOOGLE_SCOPE = "openid email profile"


# =============================================================================
# OAuth User Data
# =============================================================================
@dataclass
class OAuthUserData:
    """
    Normalized Google profile.

    Attributes:
        provider_user_id: Google account id (stored as User.google_id)
        email: Verified e-mail, lower-cased
        name: Display name (falls back to the e-mail's local part)
        avatar_url: Profile picture URL, if any
    """

    provider_user_id: str
    email: str
    name: str
    avatar_url: str | None = None


def ensure_google_configured(settings: Settings) -> None:
    """
    Raise a 501 envelope when Google credentials are missing.

    The envelope tells the operator what to set and which endpoints still
    work without Google.
    """
    if settings.google_configured:
        return

    raise ProviderNotConfiguredError(
        extra={
            "details": "Google OAuth credentials are not set on the server.",
            "instructions": {
                "step1": "Create OAuth credentials in the Google Cloud Console",
                "step2": "Set GOOGLE_CLIENT_ID and GOOGLE_CLIENT_SECRET",
                "step3": f"Add {settings.google_redirect_uri} as an authorized redirect URI",
                "step4": "Restart the server",
            },
            "availableEndpoints": {
                "register": f"POST /api/{settings.api_version}/auth/register",
                "login": f"POST /api/{settings.api_version}/auth/login",
            },
        }
    )


def _client(settings: Settings) -> AsyncOAuth2Client:
    return AsyncOAuth2Client(
        client_id=settings.google_client_id,
        client_secret=settings.google_client_secret,
        scope=GOOGLE_SCOPE,
        redirect_uri=settings.google_redirect_uri,
    )


# =============================================================================
# Google OAuth Functions
# =============================================================================
async def get_google_auth_url(settings: Settings) -> str:
    """
    Generate the Google authorization URL.

    Raises:
        ProviderNotConfiguredError: If Google credentials are missing
    """
    ensure_google_configured(settings)

    async with _client(settings) as client:
        url, _state = client.create_authorization_url(
            GOOGLE_AUTHORIZE_URL,
            access_type="offline",
            prompt="select_account",
        )
    return url


def _to_user_data(profile: dict) -> OAuthUserData:
    google_id = profile.get("id") or profile.get("sub")
    email = profile.get("email")
    if not google_id or not email:
        raise OAuthError("Google profile is missing an id or e-mail address")

    name = (profile.get("name") or "").strip() or email.split("@")[0]
    return OAuthUserData(
        provider_user_id=str(google_id),
        email=email.lower(),
        name=name[:50],
        avatar_url=profile.get("picture"),
    )


async def fetch_google_user(code: str, settings: Settings) -> OAuthUserData:
    """
    Complete the Google handshake.

    1. Exchange the authorization code for an access token
    2. Fetch the user's profile with that token
    3. Return normalized profile data

    Args:
        code: Authorization code from the callback query string
        settings: Application settings (client id, secret, redirect URI)

    Raises:
        ProviderNotConfiguredError: If Google credentials are missing
        OAuthError: If Google rejects the code or the profile is unusable
    """
    ensure_google_configured(settings)

    async with _client(settings) as client:
        try:
            await client.fetch_token(GOOGLE_TOKEN_URL, code=code)
        except (AuthlibBaseError, httpx.HTTPError) as exc:
            logger.error(f"Google token exchange failed: {exc}")
            raise OAuthError("Failed to exchange code for token") from exc

        try:
            response = await client.get(GOOGLE_USERINFO_URL)
        except httpx.HTTPError as exc:
            logger.error(f"Google user info request failed: {exc}")
            raise OAuthError("Failed to fetch user info") from exc

    if response.status_code != 200:
        logger.error(f"Google user info failed: {response.text}")
        raise OAuthError("Failed to fetch user info")

    user_data = _to_user_data(response.json())
    logger.info(f"Google OAuth successful for: {user_data.email}")
    return user_data
