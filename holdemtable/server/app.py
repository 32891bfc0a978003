"""
FastAPI Application Entry Point for holdemtable.

This module creates and configures the FastAPI application with:
- HTTP routes for table management and actions
- WebSocket endpoint for real-time table updates
- CORS middleware for development
- A TableManager (and optional chip bank client) on app.state
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from holdemtable import __version__
from holdemtable.config import Settings
from holdemtable.core.game import AgentFactory
from holdemtable.server.bank import ChipBank
from holdemtable.server.routes import router
from holdemtable.server.session import TableManager
from holdemtable.server.websocket import websocket_endpoint


logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    bank: Optional[ChipBank] = None,
    agent_factory: Optional[AgentFactory] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Server settings (loaded from the environment by default)
        bank: Chip bank client; built from settings.bank_url when omitted
        agent_factory: Agent builder for computer seats

    Returns:
        Configured FastAPI application instance
    """
    settings = settings or Settings.from_env()

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    if bank is None and settings.bank_url:
        bank = ChipBank(settings.bank_url, timeout=settings.request_timeout)
    if bank is None:
        logger.info("No chip bank configured, tables run in local mode")

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("holdemtable server starting up...")
        yield
        logger.info("holdemtable server shutting down...")
        await app.state.tables.close_all()
        if app.state.bank is not None:
            await app.state.bank.aclose()

    app = FastAPI(
        title="holdemtable",
        description="Texas Hold'em table engine with HTTP and WebSocket API",
        version=__version__,
        lifespan=lifespan,
    )

    # CORS middleware for development
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.settings = settings
    app.state.bank = bank
    app.state.tables = TableManager(settings, bank=bank, agent_factory=agent_factory)

    app.include_router(router)
    app.websocket("/ws/{table_id}")(websocket_endpoint)

    return app


def main():
    """Run the server (for use as entry point)."""
    import uvicorn
    uvicorn.run(
        "holdemtable.server.app:create_app",
        factory=True,
        host="0.0.0.0",
        port=8000,
    )


if __name__ == "__main__":
    main()
