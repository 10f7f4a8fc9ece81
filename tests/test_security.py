"""
Tests for Password Hashing and Session Tokens

TokenService and PasswordHasher are used directly; no app is built.
"""

from datetime import UTC, datetime, timedelta

import pytest

from library_api.exceptions import AuthenticationError
from library_api.services.security import PasswordHasher, TokenService
from tests.conftest import TEST_SECRET_KEY, make_settings


@pytest.fixture
def tokens() -> TokenService:
    return TokenService.from_settings(make_settings())


class TestPasswordHasher:
    def test_hash_and_verify(self, hasher):
        hashed = hasher.hash("secret123")

        assert hashed != "secret123"
        assert hashed.startswith("$2b$04$")
        assert hasher.verify("secret123", hashed) is True
        assert hasher.verify("secret124", hashed) is False

    def test_hashes_are_salted(self, hasher):
        assert hasher.hash("secret123") != hasher.hash("secret123")

    def test_verify_without_stored_hash(self, hasher):
        assert hasher.verify("secret123", None) is False
        assert hasher.verify("secret123", "") is False

    def test_verify_malformed_hash(self, hasher):
        assert hasher.verify("secret123", "not-a-bcrypt-hash") is False

    def test_rounds_are_configurable(self):
        assert PasswordHasher(rounds=5).hash("secret123").startswith("$2b$05$")


class TestTokenService:
    def test_round_trip_user_id(self, tokens):
        token = tokens.create_access_token(42)

        assert tokens.get_user_id(token) == 42

    def test_claims(self, tokens):
        claims = tokens.decode(tokens.create_access_token(7))

        assert claims["sub"] == "7"
        assert claims["iss"] == "book-library-api"
        assert claims["aud"] == "book-library-users"
        assert claims["exp"] - claims["iat"] == 7 * 24 * 60 * 60

    def test_token_six_days_old_is_accepted(self, tokens):
        issued = datetime.now(UTC) - timedelta(days=6)

        assert tokens.get_user_id(tokens.create_access_token(1, issued_at=issued)) == 1

    def test_token_eight_days_old_is_expired(self, tokens):
        issued = datetime.now(UTC) - timedelta(days=8)
        token = tokens.create_access_token(1, issued_at=issued)

        with pytest.raises(AuthenticationError, match="Token has expired"):
            tokens.decode(token)

    @pytest.mark.parametrize(
        "override",
        [
            {"secret_key": "a-completely-different-secret-key-value"},
            {"issuer": "someone-else"},
            {"audience": "other-clients"},
        ],
    )
    def test_foreign_tokens_are_invalid(self, tokens, override):
        values = {
            "secret_key": TEST_SECRET_KEY,
            "issuer": tokens.issuer,
            "audience": tokens.audience,
            "lifetime": tokens.lifetime,
        }
        values.update(override)
        token = TokenService(**values).create_access_token(1)

        with pytest.raises(AuthenticationError, match="Invalid token"):
            tokens.decode(token)

    @pytest.mark.parametrize("token", ["", "garbage", "a.b.c"])
    def test_malformed_tokens_are_invalid(self, tokens, token):
        with pytest.raises(AuthenticationError, match="Invalid token"):
            tokens.decode(token)

    def test_non_numeric_subject(self, tokens):
        from jose import jwt

        now = datetime.now(UTC)
        token = jwt.encode(
            {
                "sub": "not-a-number",
                "iss": tokens.issuer,
                "aud": tokens.audience,
                "iat": now,
                "exp": now + timedelta(hours=1),
            },
            TEST_SECRET_KEY,
            algorithm="HS256",
        )

        with pytest.raises(AuthenticationError, match="Invalid token"):
            tokens.get_user_id(token)
