"""FastAPI application entry point."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware

from src.api.routers import api_router
from src.config.settings import Settings, get_settings
from src.infrastructure.logging.logger import setup_logging
from src.orchestrator.engine import create_engine

settings = get_settings()

setup_logging(
    level=settings.log_level,
    json_output=not settings.debug,
    silence_noisy_loggers=True,
)

logger = logging.getLogger(__name__)


def _validate_startup_config(settings: Settings) -> None:
    """Validate required configuration at startup."""
    if settings.gateway_mode == "local" and not settings.local_store_path:
        logger.warning("No local_store_path configured; local gateway starts with no boards")
    if settings.gateway_mode == "remote" and not settings.registry_api_key:
        logger.warning("No registry_api_key configured; registry requests are unauthenticated")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Startup and shutdown lifecycle."""
    logger.info(f"Starting {settings.app_name} {settings.app_version}")
    _validate_startup_config(settings)
    app.state.engine = create_engine(settings)

    yield
    logger.info(f"Shutting down {settings.app_name}")
    try:
        await app.state.engine.close()
    except Exception as e:
        logger.error("Error closing verification engine: %s", e, exc_info=True)


app = FastAPI(
    title=settings.app_name,
    description="Scored, cached single and cross-source verification of free-text queries",
    version=settings.app_version,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials="*" not in settings.allowed_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(ProxyHeadersMiddleware, trusted_hosts=["*"])

app.include_router(api_router, prefix="/api")
