"""Entry point for the City CRUD API.

Serves the FastAPI application with Uvicorn.  Host and port come from
the ``HOST`` and ``PORT`` environment variables (defaults ``0.0.0.0``
and ``3000``); see ``city_crud_api/app/core/config.py`` for the other
supported variables.

Usage:
    python run.py
"""
import asyncio
import logging

from uvicorn import Config, Server

from city_crud_api.app.core.config import settings
from city_crud_api.app.main import app


async def main() -> None:
    """Run the API until interrupted."""
    config = Config(
        app=app,
        host=settings.host,
        port=settings.port,
        reload=False,
        log_level=settings.log_level.lower(),
    )
    server = Server(config)
    try:
        await server.serve()
    except Exception:
        logging.exception("API server stopped unexpectedly")
        raise


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, SystemExit):
        pass
