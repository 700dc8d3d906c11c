"""Trust gateway: registry and record-search collaborators."""

from src.infrastructure.gateway.base import (
    BoardDescriptor,
    GatewayResult,
    MatchingRecord,
    Ok,
    TrustGateway,
    Unavailable,
)
from src.infrastructure.gateway.factory import create_gateway
from src.infrastructure.gateway.local import LocalTrustGateway
from src.infrastructure.gateway.remote import RemoteTrustGateway

__all__ = [
    "BoardDescriptor",
    "GatewayResult",
    "LocalTrustGateway",
    "MatchingRecord",
    "Ok",
    "RemoteTrustGateway",
    "TrustGateway",
    "Unavailable",
    "create_gateway",
]
