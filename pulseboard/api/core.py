"""Core endpoints: health."""

from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter

from pulseboard.core.services import Services


def register_routes(router: APIRouter, svc: Services, **kw):

    @router.get("/health")
    def api_health():
        return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}
