"""In-process trust gateway backed by boards and records held in memory."""

import json
import logging
import threading
from pathlib import Path
from typing import Any

from src.infrastructure.gateway.base import (
    BoardDescriptor,
    GatewayResult,
    MatchingRecord,
    Ok,
)
from src.utils.text_processing import normalize_text

logger = logging.getLogger(__name__)


class LocalTrustGateway:
    """
    Local-fallback gateway.

    Boards and records live in memory and can be seeded from a JSON file:

        {
          "boards": [{"id": "b1", "organization_id": "org1", "name": "...",
                      "organization_name": "...", "category": "healthcare"}],
          "records": [{"id": "r1", "board_id": "b1", "data": {...}}]
        }

    A record matches a search when every whitespace token of the search text
    occurs (case-insensitively) in the record's field values.
    """

    name = "local"

    def __init__(
        self,
        boards: list[BoardDescriptor] | None = None,
        records: list[MatchingRecord] | None = None,
    ):
        self._boards: dict[str, BoardDescriptor] = {}
        self._records: dict[str, list[MatchingRecord]] = {}
        self._lock = threading.Lock()
        for board in boards or []:
            self.add_board(board)
        for record in records or []:
            self.add_record(record)

    @classmethod
    def from_file(cls, path: str | Path) -> "LocalTrustGateway":
        """Build a gateway from a JSON seed file."""
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
        boards = [BoardDescriptor(**item) for item in raw.get("boards", [])]
        records = [MatchingRecord(**item) for item in raw.get("records", [])]
        logger.info(
            f"Loaded local trust store from {path}: {len(boards)} boards, {len(records)} records"
        )
        return cls(boards=boards, records=records)

    def add_board(self, board: BoardDescriptor) -> None:
        with self._lock:
            self._boards[board.id] = board
            self._records.setdefault(board.id, [])

    def add_record(self, record: MatchingRecord) -> None:
        with self._lock:
            if record.board_id not in self._boards:
                raise KeyError(f"Unknown board: {record.board_id}")
            self._records[record.board_id].append(record)

    async def list_sources(
        self, organization_id: str, category: str | None = None
    ) -> GatewayResult[list[BoardDescriptor]]:
        with self._lock:
            boards = [
                board
                for board in self._boards.values()
                if board.organization_id == organization_id
                and (category is None or board.category == category)
            ]
        return Ok(boards)

    async def search_records(
        self, board_id: str, text: str, limit: int = 10
    ) -> GatewayResult[list[MatchingRecord]]:
        with self._lock:
            records = list(self._records.get(board_id, []))

        tokens = normalize_text(text).lower().split(" ")
        tokens = [token for token in tokens if token]
        if not tokens:
            return Ok([])
        matches = [record for record in records if self._matches(record, tokens)]
        return Ok(matches[:limit])

    async def close(self) -> None:
        return None

    @staticmethod
    def _matches(record: MatchingRecord, tokens: list[str]) -> bool:
        haystack = " ".join(_flatten(record.data)).lower()
        return all(token in haystack for token in tokens)


def _flatten(value: Any) -> list[str]:
    if isinstance(value, dict):
        return [text for item in value.values() for text in _flatten(item)]
    if isinstance(value, (list, tuple)):
        return [text for item in value for text in _flatten(item)]
    return [str(value)]
