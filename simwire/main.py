from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from simwire.api.health import router as health_router
from simwire.config import Settings, settings as default_settings
from simwire.host import SimulationHost
from simwire.ws.handler import router as ws_router

logger = logging.getLogger(__name__)


def create_app(host: SimulationHost, settings: Settings | None = None) -> FastAPI:
    """Build the websocket application around a simulation host."""
    settings = settings or default_settings
    logging.basicConfig(level=settings.log_level.upper())

    if not isinstance(host, SimulationHost):
        raise TypeError(f"{type(host).__name__} does not implement SimulationHost")

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(
            f"Starting simwire server (protocol v{settings.min_protocol_version}-v{settings.protocol_version})"
        )
        yield
        logger.info("simwire server shutdown complete")

    app = FastAPI(title="simwire", lifespan=lifespan, debug=settings.debug)
    app.state.host = host
    app.state.settings = settings

    app.include_router(health_router)
    app.include_router(ws_router)
    return app
