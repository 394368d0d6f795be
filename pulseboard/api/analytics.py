"""Analytics explorer endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from pulseboard.core.services import Services


def register_routes(router: APIRouter, svc: Services, **kw):
    auth = kw["auth"]
    analytics = svc.analytics

    @router.get("/analytics", dependencies=[Depends(auth.current_user)])
    def api_analytics(
        from_: str | None = Query(None, alias="from"),
        to: str | None = Query(None),
    ):
        return analytics.explore(from_, to)
