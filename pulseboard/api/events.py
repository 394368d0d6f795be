"""Event log endpoints: paginated listing and aggregate metrics."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from pulseboard.core.services import Services


def register_routes(router: APIRouter, svc: Services, **kw):
    auth = kw["auth"]
    events = svc.events
    user_dep = [Depends(auth.current_user)]

    @router.get("/analytics/events", dependencies=user_dep)
    def api_events(
        category: str | None = Query(None),
        start_date: str | None = Query(None, alias="startDate"),
        end_date: str | None = Query(None, alias="endDate"),
        page: int = Query(1),
        limit: int = Query(20),
    ):
        return events.list_events(
            category=category or None, start_date=start_date, end_date=end_date,
            page=page, limit=limit,
        )

    @router.get("/analytics/metrics", dependencies=user_dep)
    def api_event_metrics(category: str | None = Query(None)):
        return events.metrics(category=category or None)
