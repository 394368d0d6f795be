"""PulseBoard server. Entry point for the dashboard API."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from pulseboard.api import create_api
from pulseboard.config import Config, load_config
from pulseboard.core.services import create_services
from pulseboard.storage.database import Database

logger = logging.getLogger("pulseboard")


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
    )


def build_app(config: Config | None = None) -> FastAPI:
    """Build the API app. The database connects when the app starts, not here."""
    if config is None:
        config = load_config()

    db = Database(config.db)
    svc = create_services(config=config, db=db)
    app = create_api(svc)

    @asynccontextmanager
    async def lifespan(app):
        db.connect()
        db.run_migrations()
        try:
            yield
        finally:
            db.close()

    app.router.lifespan_context = lifespan
    return app


def main():
    """Run the PulseBoard API server."""
    import uvicorn

    config = load_config()
    configure_logging(config.log_level)

    app = build_app(config)
    logger.info("Starting PulseBoard (HTTP on %s:%d, API at /api)", config.http_host, config.http_port)
    uvicorn.run(app, host=config.http_host, port=config.http_port)


if __name__ == "__main__":
    main()
