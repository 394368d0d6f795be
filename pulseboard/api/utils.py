"""Shared utilities for API route modules: bearer-token auth dependencies."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from pulseboard.core.tokens import TokenService
from pulseboard.core.utils import AuthenticationError

_bearer = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class AuthDeps:
    """FastAPI dependencies resolving the calling user from the Authorization header."""
    current_user: Callable[..., dict]
    require_admin: Callable[..., dict]


def build_auth(tokens: TokenService) -> AuthDeps:
    def current_user(
        credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
    ) -> dict:
        if credentials is None:
            raise HTTPException(status_code=401, detail="Access denied. No token provided.")
        try:
            return tokens.verify(credentials.credentials)
        except AuthenticationError:
            raise HTTPException(status_code=401, detail="Invalid or expired token.") from None

    def require_admin(user: dict = Depends(current_user)) -> dict:
        if user.get("role") != "ADMIN":
            raise HTTPException(status_code=403, detail="Access denied. Admin privileges required.")
        return user

    return AuthDeps(current_user=current_user, require_admin=require_admin)
