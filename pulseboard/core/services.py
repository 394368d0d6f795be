"""Service container and factory. Centralizes component initialization."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from pulseboard.config import Config, load_config
from pulseboard.core.analytics import AnalyticsService
from pulseboard.core.dashboard import DashboardService
from pulseboard.core.events import EventService
from pulseboard.core.tokens import TokenService
from pulseboard.core.users import UserManager
from pulseboard.storage.database import Database
from pulseboard.storage.repository import AnalyticsRepository, EventRepository

logger = logging.getLogger(__name__)


@dataclass
class Services:
    """Holds all initialized PulseBoard components."""

    config: Config
    db: Database
    analytics_repo: AnalyticsRepository
    event_repo: EventRepository
    dashboard: DashboardService
    analytics: AnalyticsService
    events: EventService
    users: UserManager
    tokens: TokenService


def create_services(config: Config | None = None, db: Database | None = None) -> Services:
    """Build all services from config.

    Args:
        config: Configuration to use. Loads from env if None.
        db: Database handle (connected later by the server lifespan). Creates one if None.
    """
    if config is None:
        config = load_config()

    if db is None:
        db = Database(config.db)

    analytics_repo = AnalyticsRepository(db)
    event_repo = EventRepository(db)

    svc = Services(
        config=config,
        db=db,
        analytics_repo=analytics_repo,
        event_repo=event_repo,
        dashboard=DashboardService(
            analytics_repo,
            window_days=config.analytics.window_days,
            top_pages_limit=config.analytics.top_pages_limit,
        ),
        analytics=AnalyticsService(analytics_repo, default_days=config.analytics.window_days),
        events=EventService(event_repo, top_events_limit=config.analytics.top_events_limit),
        users=UserManager(db, config.auth),
        tokens=TokenService(config.auth),
    )
    logger.info(
        "Services ready (window=%dd, top pages=%d)",
        config.analytics.window_days, config.analytics.top_pages_limit,
    )
    return svc
