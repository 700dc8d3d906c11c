"""Trust gateway backed by a remote registry REST service."""

import logging
from typing import Any

import httpx

from src.config.settings import Settings
from src.infrastructure.gateway.base import (
    BoardDescriptor,
    GatewayResult,
    MatchingRecord,
    Ok,
    Unavailable,
)
from src.utils.retry import run_with_retry

logger = logging.getLogger(__name__)


class RemoteTrustGateway:
    """
    Talks to the TrustBoard registry over HTTP.

    Endpoints:
        GET {base}/organizations/{organization_id}/boards?category=...
        GET {base}/boards/{board_id}/records?q=...&page=1&page_size=N

    Both return ``{"items": [...]}``. A 404 on either endpoint means "nothing
    there" and maps to ``Ok([])``; transient failures are retried and, once
    retries are exhausted, reported as ``Unavailable``.

    Usage:
        gateway = RemoteTrustGateway(settings)
        result = await gateway.list_sources("org-1", "education")
        await gateway.close()
    """

    name = "remote"

    def __init__(self, settings: Settings, client: httpx.AsyncClient | None = None):
        self.settings = settings
        headers = {"Accept": "application/json"}
        if settings.registry_api_key:
            headers["Authorization"] = f"Bearer {settings.registry_api_key}"
        self._client = client or httpx.AsyncClient(
            base_url=settings.registry_base_url.rstrip("/"),
            timeout=settings.registry_timeout,
            headers=headers,
        )

    async def list_sources(
        self, organization_id: str, category: str | None = None
    ) -> GatewayResult[list[BoardDescriptor]]:
        params: dict[str, Any] = {}
        if category:
            params["category"] = category
        result = await self._get_items(f"/organizations/{organization_id}/boards", params)
        if isinstance(result, Unavailable):
            return result
        boards = [
            BoardDescriptor(
                id=str(item["id"]),
                organization_id=str(item.get("organization_id", organization_id)),
                name=item.get("name", ""),
                organization_name=item.get("organization_name", ""),
                category=item.get("category"),
                is_active=bool(item.get("is_active", True)),
            )
            for item in result.data
        ]
        return Ok(boards)

    async def search_records(
        self, board_id: str, text: str, limit: int = 10
    ) -> GatewayResult[list[MatchingRecord]]:
        params = {"q": text, "page": 1, "page_size": limit}
        result = await self._get_items(f"/boards/{board_id}/records", params)
        if isinstance(result, Unavailable):
            return result
        records = [
            MatchingRecord(
                id=str(item["id"]),
                board_id=str(item.get("board_id", board_id)),
                data=item.get("data", {}),
                verification_status=item.get("verification_status", "verified"),
            )
            for item in result.data[:limit]
        ]
        return Ok(records)

    async def close(self) -> None:
        await self._client.aclose()

    async def _get_items(
        self, path: str, params: dict[str, Any]
    ) -> GatewayResult[list[dict[str, Any]]]:
        async def _request() -> httpx.Response:
            response = await self._client.get(path, params=params)
            if response.status_code != 404:
                response.raise_for_status()
            return response

        try:
            response = await run_with_retry(
                _request,
                max_retries=self.settings.registry_max_retries,
                initial_delay=self.settings.registry_retry_delay,
                backoff_factor=self.settings.retry_backoff_factor,
            )
        except (httpx.HTTPError, TimeoutError) as e:
            logger.error(f"Registry request {path} failed: {e}")
            return Unavailable(str(e))

        if response.status_code == 404:
            return Ok([])
        try:
            payload = response.json()
        except ValueError as e:
            logger.error(f"Registry returned invalid JSON for {path}: {e}")
            return Unavailable(f"invalid JSON: {e}")
        items = payload.get("items", []) if isinstance(payload, dict) else payload
        if not isinstance(items, list):
            return Unavailable(f"unexpected payload shape for {path}")
        return Ok(items)
