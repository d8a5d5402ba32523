"""Entrypoint for ``python -m safari_launcher``."""

from __future__ import annotations

import logging

import uvicorn

from .config import load_settings
from .main import create_app


def main() -> None:
    """Load configuration and start the FastAPI app using uvicorn."""

    settings = load_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    # uvicorn turns SIGINT/SIGTERM into an application shutdown, which kills
    # every active launcher and restores browser state.
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level,
        loop="asyncio",
    )


if __name__ == "__main__":
    main()
