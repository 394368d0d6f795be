"""Auth endpoints: register, login, current user."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from pulseboard.core.services import Services


class RegisterBody(BaseModel):
    email: str | None = None
    password: str | None = None
    name: str | None = None
    role: str | None = None


class LoginBody(BaseModel):
    email: str | None = None
    password: str | None = None


def register_routes(router: APIRouter, svc: Services, **kw):
    auth = kw["auth"]
    users = svc.users
    tokens = svc.tokens

    @router.post("/auth/register", status_code=201)
    def api_register(body: RegisterBody):
        user = users.register(body.email, body.password, body.name, body.role)
        return {"token": tokens.issue(user), "user": user}

    @router.post("/auth/login")
    def api_login(body: LoginBody):
        user = users.authenticate(body.email, body.password)
        return {"token": tokens.issue(user), "user": user}

    @router.get("/auth/me")
    def api_me(current: dict = Depends(auth.current_user)):
        return {"user": users.get(current["userId"])}
