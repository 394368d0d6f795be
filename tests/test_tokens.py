"""Tests for pulseboard.core.tokens.TokenService."""

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from pulseboard.config import AuthConfig
from pulseboard.core.tokens import TokenService
from pulseboard.core.utils import AuthenticationError

USER = {"id": 7, "email": "ada@example.com", "role": "ADMIN"}


class TestTokenService:
    def test_round_trip(self):
        tokens = TokenService(AuthConfig(jwt_secret="s3cret"))
        assert tokens.verify(tokens.issue(USER)) == {"userId": 7, "email": "ada@example.com", "role": "ADMIN"}

    def test_expiry_is_configured_days(self):
        tokens = TokenService(AuthConfig(jwt_secret="s3cret", token_ttl_days=7))
        now = datetime.now(timezone.utc).replace(microsecond=0)
        claims = jwt.decode(tokens.issue(USER, now=now), "s3cret", algorithms=["HS256"])
        assert claims["exp"] - claims["iat"] == int(timedelta(days=7).total_seconds())

    def test_expired(self):
        tokens = TokenService(AuthConfig(jwt_secret="s3cret"))
        token = tokens.issue(USER, now=datetime.now(timezone.utc) - timedelta(days=8))
        with pytest.raises(AuthenticationError, match="expired"):
            tokens.verify(token)

    def test_wrong_secret(self):
        token = TokenService(AuthConfig(jwt_secret="one")).issue(USER)
        with pytest.raises(AuthenticationError):
            TokenService(AuthConfig(jwt_secret="two")).verify(token)

    def test_garbage(self):
        with pytest.raises(AuthenticationError):
            TokenService(AuthConfig()).verify("not.a.token")

    def test_missing_subject(self):
        token = jwt.encode(
            {"exp": datetime.now(timezone.utc) + timedelta(hours=1)}, "s3cret", algorithm="HS256",
        )
        with pytest.raises(AuthenticationError):
            TokenService(AuthConfig(jwt_secret="s3cret")).verify(token)
