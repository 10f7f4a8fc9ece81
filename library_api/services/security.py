"""
Security Service

Password hashing and session tokens.

Security Features:
==================
1. Password hashing with bcrypt (passlib), cost taken from settings
2. Signed HS256 session tokens (python-jose) carrying the user id as "sub"
   plus issuer, audience, issued-at and expiry claims
3. Token verification that tells expired tokens apart from invalid ones

Both are plain objects built from Settings by create_app() and kept on
app.state:

    hasher = PasswordHasher(rounds=settings.bcrypt_rounds)
    tokens = TokenService.from_settings(settings)

    token = tokens.create_access_token(user.id)
    claims = tokens.decode(token)    # raises AuthenticationError
"""

import logging
from datetime import UTC, datetime, timedelta
from typing import Any

from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext

from library_api.config import Settings
from library_api.exceptions import AuthenticationError

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"


# -------------------------------------------------------------------------
# Password Hashing
# -------------------------------------------------------------------------
class PasswordHasher:
    """
    Bcrypt password hashing.

    Args:
        rounds: bcrypt cost factor (12 in production, 4 is enough for tests)

    Example:
        >>> hasher = PasswordHasher(rounds=4)
        >>> hashed = hasher.hash("secret123")
        >>> hashed.startswith("$2b$")
        True
        >>> hasher.verify("secret123", hashed)
        True
    """

    def __init__(self, rounds: int = 12) -> None:
        # deprecated="auto": hashes made with older schemes get flagged for upgrade
        self._context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=rounds,
        )

    def hash(self, password: str) -> str:
        return self._context.hash(password)

    def verify(self, plain_password: str, hashed_password: str | None) -> bool:
        """
        Check a password against a stored hash.

        Returns False for accounts without a password (Google-only users)
        and for malformed hashes.
        """
        if not hashed_password:
            return False
        try:
            return self._context.verify(plain_password, hashed_password)
        except ValueError:
            logger.warning("Stored password hash could not be parsed")
            return False


# -------------------------------------------------------------------------
# Session Tokens
# -------------------------------------------------------------------------
class TokenService:
    """
    Issue and verify session tokens.

    Tokens are stateless: nothing is stored server-side and there is no
    revocation. A token stays valid until it expires.
    """

    def __init__(
        self,
        secret_key: str,
        issuer: str,
        audience: str,
        lifetime: timedelta,
    ) -> None:
        self.secret_key = secret_key
        self.issuer = issuer
        self.audience = audience
        self.lifetime = lifetime

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenService":
        return cls(
            secret_key=settings.secret_key,
            issuer=settings.jwt_issuer,
            audience=settings.jwt_audience,
            lifetime=timedelta(minutes=settings.access_token_expire_minutes),
        )

    def create_access_token(self, user_id: int, issued_at: datetime | None = None) -> str:
        """
        Create a session token for a user.

        Args:
            user_id: Id of the user the token identifies
            issued_at: Issue time (defaults to now; tests pass a past time)

        Returns:
            Encoded JWT string

        Example:
            >>> token = tokens.create_access_token(42)
            >>> token.count(".") == 2  # header.payload.signature
            True
        """
        issued_at = issued_at or datetime.now(UTC)
        claims = {
            "sub": str(user_id),
            "iss": self.issuer,
            "aud": self.audience,
            "iat": issued_at,
            "exp": issued_at + self.lifetime,
        }
        return jwt.encode(claims, self.secret_key, algorithm=ALGORITHM)

    def decode(self, token: str) -> dict[str, Any]:
        """
        Verify a token's signature, expiry, issuer and audience.

        Returns:
            The token claims

        Raises:
            AuthenticationError: "Token has expired" or "Invalid token"
        """
        try:
            return jwt.decode(
                token,
                self.secret_key,
                algorithms=[ALGORITHM],
                audience=self.audience,
                issuer=self.issuer,
            )
        except ExpiredSignatureError as exc:
            raise AuthenticationError("Token has expired") from exc
        except JWTError as exc:
            raise AuthenticationError("Invalid token") from exc

    def get_user_id(self, token: str) -> int:
        """Decode a token and return the user id from its "sub" claim."""
        claims = self.decode(token)
        try:
            return int(claims["sub"])
        except (KeyError, TypeError, ValueError) as exc:
            raise AuthenticationError("Invalid token") from exc
