"""Dashboard endpoints. Always cover the trailing 30 days."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from pulseboard.core.services import Services


def register_routes(router: APIRouter, svc: Services, **kw):
    auth = kw["auth"]
    dashboard = svc.dashboard
    user_dep = [Depends(auth.current_user)]

    @router.get("/dashboard/stats", dependencies=user_dep)
    def api_dashboard_stats():
        return dashboard.stats()

    @router.get("/dashboard/visitors", dependencies=user_dep)
    def api_dashboard_visitors():
        return dashboard.visitors_over_time()

    @router.get("/dashboard/traffic-sources", dependencies=user_dep)
    def api_dashboard_traffic_sources():
        return dashboard.traffic_sources()

    @router.get("/dashboard/top-pages", dependencies=user_dep)
    def api_dashboard_top_pages():
        return dashboard.top_pages()
