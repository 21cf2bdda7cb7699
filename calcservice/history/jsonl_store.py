"""
Append-only JSONL calculation history.

Each line is one JSON object:
  {"operation", "num1", "num2"?, "result", "timestamp"}

Lines are only ever appended, so file order is append order. Corrupt lines
are skipped and logged on read.
"""

import asyncio
import json
import os
from datetime import datetime, timezone

from calcservice.shared.config import HistoryConfig
from calcservice.shared.constants import DEFAULT_HISTORY_LIMIT
from calcservice.shared.errors import StorageError
from calcservice.shared.interfaces import IHistoryStore
from calcservice.shared.logging_utils import StructuredLogger
from calcservice.shared.models import CalculationRecord, HealthStatus

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


class JSONLHistoryStore(IHistoryStore):
    """Persistent JSONL file history store."""

    def __init__(self, config: HistoryConfig, logger: StructuredLogger):
        self._path = config.file_path
        self._logger = logger
        self._lock = asyncio.Lock()
        self._connected = False

    @property
    def path(self) -> str:
        return self._path

    async def connect(self) -> None:
        try:
            directory = os.path.dirname(self._path)
            if directory:
                os.makedirs(directory, exist_ok=True)
            with open(self._path, "a", encoding="utf-8"):
                pass
        except OSError as e:
            self._connected = False
            self._logger.error("History log unavailable", path=self._path, error=str(e))
            return
        self._connected = True
        self._logger.info("History log ready", path=self._path)

    async def close(self) -> None:
        self._connected = False

    async def append(self, record: CalculationRecord) -> CalculationRecord:
        async with self._lock:
            stamped = record.stamped()
            entry = stamped.to_document()
            entry["timestamp"] = stamped.timestamp.isoformat()
            try:
                with open(self._path, "a", encoding="utf-8") as f:
                    f.write(json.dumps(entry, separators=(",", ":")) + "\n")
            except OSError as e:
                raise StorageError(f"Error saving calculation: {e}") from e
        self._logger.info(f"Saved {stamped.operation.value} calculation to history log")
        return stamped

    def _read_all(self) -> list[CalculationRecord]:
        if not os.path.exists(self._path):
            return []

        records = []
        with open(self._path, "rb") as f:
            for raw in f:
                raw = raw.strip()
                if not raw:
                    continue
                try:
                    records.append(CalculationRecord.from_dict(json.loads(raw.decode("utf-8"))))
                except (UnicodeDecodeError, json.JSONDecodeError, KeyError, TypeError, ValueError):
                    self._logger.error(f"Corrupt history log line: {raw[:100]!r}")
        return records

    async def recent(self, limit: int = DEFAULT_HISTORY_LIMIT) -> list[CalculationRecord]:
        if limit <= 0:
            return []
        async with self._lock:
            try:
                records = self._read_all()
            except OSError as e:
                raise StorageError(f"Error fetching calculation history: {e}") from e
        # newest first; equal timestamps fall back to append order
        ordered = sorted(
            enumerate(records),
            key=lambda pair: (pair[1].timestamp or _EPOCH, pair[0]),
            reverse=True,
        )
        return [record for _, record in ordered[:limit]]

    async def health_status(self) -> HealthStatus:
        exists = os.path.exists(self._path)
        return HealthStatus(
            connected=self._connected and exists,
            db_name=os.path.basename(self._path),
            collection_count=1 if exists else 0,
        )
