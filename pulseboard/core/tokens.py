"""JWT bearer tokens for API sessions."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

import jwt

from pulseboard.config import AuthConfig
from pulseboard.core.utils import AuthenticationError

logger = logging.getLogger(__name__)


class TokenService:
    """Issues and verifies signed tokens carrying user id, email and role."""

    def __init__(self, config: AuthConfig):
        self.config = config

    def issue(self, user: dict, now: datetime | None = None) -> str:
        now = now or datetime.now(timezone.utc)
        payload = {
            "sub": str(user["id"]),
            "email": user["email"],
            "role": user["role"],
            "iat": now,
            "exp": now + timedelta(days=self.config.token_ttl_days),
        }
        return jwt.encode(payload, self.config.jwt_secret, algorithm=self.config.jwt_algorithm)

    def verify(self, token: str) -> dict:
        """Decode a token into {"userId", "email", "role"}. Raises AuthenticationError."""
        try:
            claims = jwt.decode(
                token, self.config.jwt_secret,
                algorithms=[self.config.jwt_algorithm],
                options={"require": ["sub", "exp"]},
            )
        except jwt.ExpiredSignatureError:
            raise AuthenticationError("Token expired") from None
        except jwt.InvalidTokenError as e:
            logger.debug("Rejected token: %s", e)
            raise AuthenticationError("Invalid token") from None

        try:
            user_id = int(claims["sub"])
        except (TypeError, ValueError):
            raise AuthenticationError("Invalid token subject") from None

        return {"userId": user_id, "email": claims.get("email"), "role": claims.get("role")}
