"""FastAPI entry point for gitlab-slack."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import uvicorn
from fastapi import FastAPI

from . import __version__
from .config import settings
from .service import GitLabSlackService
from .webhook_handler import webhook_router

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s | %(name)s | %(message)s",
    datefmt="%H:%M:%S",
)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    The label cache must be complete before serving, so any configuration or
    GitLab failure here aborts startup.
    """
    logger = logging.getLogger("gitlab_slack.startup")
    logger.info("Starting up...")

    service = GitLabSlackService.from_settings(settings)
    try:
        await service.start()
    except Exception:
        logger.exception("Failed to build label caches; terminating")
        await service.close()
        raise

    app.state.service = service
    logger.info("Startup complete.")
    yield

    logger.info("Terminating...")
    await service.close()


app = FastAPI(
    title="gitlab-slack",
    description="Relays GitLab webhooks to Slack",
    version=__version__,
    lifespan=lifespan,
)

app.include_router(webhook_router)


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {
        "name": "gitlab-slack",
        "version": __version__,
        "status": "running",
    }


def run() -> None:
    """Run the application."""
    uvicorn.run(
        "gitlab_slack.main:app",
        host=settings.host,
        port=settings.port,
        reload=False,
    )


if __name__ == "__main__":
    run()
