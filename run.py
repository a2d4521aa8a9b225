"""Entry point for running the CampTogether API.

Intended to be executed from the project root, for example inside the
container image deployed to Cloud Run, where only a single Python file is
specified as the command.  Host, port and log level come from the same
environment variables the application reads (``HOST``, ``PORT``,
``LOG_LEVEL``).

Usage:
    python run.py
"""
import asyncio
import logging

from uvicorn import Config, Server

from camptogether_api.app.core.config import settings
from camptogether_api.app.main import app


async def main() -> None:
    """Serve the API until interrupted."""
    config = Config(
        app=app,
        host=settings.host,
        port=settings.port,
        reload=False,
        log_level=settings.log_level.lower(),
        proxy_headers=True,
        # Cloud Run terminates TLS; trust its X-Forwarded-For for client ids.
        forwarded_allow_ips="*",
    )
    server = Server(config)
    logging.getLogger(__name__).info("CampTogether API listening on %s:%s", settings.host, settings.port)
    await server.serve()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, SystemExit):
        pass
