"""Trust gateway contract: registry listing and record search."""

from dataclasses import dataclass, field
from typing import Any, Generic, Protocol, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Collaborator answered; ``data`` may be empty."""

    data: T


@dataclass(frozen=True)
class Unavailable:
    """Collaborator could not be reached at all."""

    reason: str


GatewayResult = Union[Ok[T], Unavailable]


@dataclass(frozen=True)
class BoardDescriptor:
    """A TrustBoard as listed by the registry."""

    id: str
    organization_id: str
    name: str = ""
    organization_name: str = ""
    category: str | None = None
    is_active: bool = True


@dataclass(frozen=True)
class MatchingRecord:
    """A record returned by a board search."""

    id: str
    board_id: str
    data: dict[str, Any] = field(default_factory=dict)
    verification_status: str = "verified"


class TrustGateway(Protocol):
    """Registry and record-search collaborator.

    Implementations never raise for "no results"; they return ``Ok([])``.
    Total unavailability is reported as ``Unavailable``.
    """

    name: str

    async def list_sources(
        self, organization_id: str, category: str | None = None
    ) -> GatewayResult[list[BoardDescriptor]]:
        ...

    async def search_records(
        self, board_id: str, text: str, limit: int = 10
    ) -> GatewayResult[list[MatchingRecord]]:
        ...

    async def close(self) -> None:
        ...
