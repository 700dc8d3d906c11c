"""Selects the trust gateway variant once, from settings."""

import logging

from src.config.settings import Settings
from src.infrastructure.gateway.base import TrustGateway
from src.infrastructure.gateway.local import LocalTrustGateway
from src.infrastructure.gateway.remote import RemoteTrustGateway

logger = logging.getLogger(__name__)


def create_gateway(settings: Settings) -> TrustGateway:
    """Build the gateway named by ``settings.gateway_mode``."""
    if settings.gateway_mode == "remote":
        logger.info(f"Using remote trust gateway at {settings.registry_base_url}")
        return RemoteTrustGateway(settings)

    if settings.local_store_path:
        return LocalTrustGateway.from_file(settings.local_store_path)
    logger.info("Using empty local trust gateway")
    return LocalTrustGateway()
