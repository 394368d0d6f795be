"""Settings endpoints: site settings, own profile and password, user roles."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Path
from pydantic import BaseModel

from pulseboard.core.services import Services
from pulseboard.storage import settings_store


class SettingBody(BaseModel):
    value: str | None = None


class ProfileBody(BaseModel):
    name: str | None = None
    email: str | None = None


class PasswordBody(BaseModel):
    currentPassword: str | None = None
    newPassword: str | None = None
    confirmPassword: str | None = None


class RoleBody(BaseModel):
    role: str | None = None


def register_routes(router: APIRouter, svc: Services, **kw):
    auth = kw["auth"]
    db = svc.db
    users = svc.users

    @router.get("/settings", dependencies=[Depends(auth.current_user)])
    def api_settings():
        return {"settings": settings_store.load_all(db)}

    @router.patch("/settings/profile")
    def api_update_profile(body: ProfileBody, current: dict = Depends(auth.current_user)):
        return {"user": users.update_profile(current["userId"], body.name, body.email)}

    @router.post("/settings/password")
    def api_change_password(body: PasswordBody, current: dict = Depends(auth.current_user)):
        users.change_password(
            current["userId"], body.currentPassword, body.newPassword, body.confirmPassword,
        )
        return {"message": "Password updated successfully"}

    @router.get("/settings/users", dependencies=[Depends(auth.require_admin)])
    def api_list_users():
        return {"users": users.list_users()}

    @router.patch("/settings/users/{user_id}/role")
    def api_update_role(
        body: RoleBody,
        user_id: int = Path(...),
        admin: dict = Depends(auth.require_admin),
    ):
        return {"user": users.update_role(admin["userId"], user_id, body.role)}

    @router.put("/settings/{setting_id}")
    def api_update_setting(
        body: SettingBody,
        setting_id: int = Path(...),
        admin: dict = Depends(auth.require_admin),
    ):
        if body.value is None:
            raise HTTPException(status_code=400, detail="Value is required.")
        setting = settings_store.update(db, setting_id, body.value, admin["userId"])
        if setting is None:
            raise HTTPException(status_code=404, detail="Setting not found.")
        return {"setting": setting}
