"""Entry point for the Availability API.

Serves the FastAPI application with Uvicorn on the host and port from
``availability_api.app.core.config`` (``HOST``/``PORT`` environment
variables, default ``0.0.0.0:8080``).  SIGINT and SIGTERM trigger a
graceful shutdown; in‑flight requests are allowed to finish.

Usage:
    python run.py
"""
import asyncio
import logging

from uvicorn import Config, Server

from availability_api.app.core.config import settings
from availability_api.app.main import app


async def main() -> None:
    """Serve the API until interrupted."""
    config = Config(
        app=app,
        host=settings.host,
        port=settings.port,
        reload=False,
        log_level=settings.log_level.lower(),
        timeout_graceful_shutdown=1,
    )
    server = Server(config)
    await server.serve()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, SystemExit):
        logging.getLogger(__name__).info("shutting down")
