"""
MongoDB-backed calculation history.
Implements IHistoryStore over pymongo's asyncio client.

Each record is a single-document insert, so concurrent appends rely on the
server's per-document atomicity. Server selection is bounded by
``MongoConfig.timeout_ms`` so reads and writes fail instead of hanging.
"""

from typing import Optional

from pymongo import AsyncMongoClient, DESCENDING
from pymongo.errors import PyMongoError

from calcservice.shared.config import MongoConfig
from calcservice.shared.constants import DEFAULT_HISTORY_LIMIT
from calcservice.shared.errors import StorageError
from calcservice.shared.interfaces import IHistoryStore
from calcservice.shared.logging_utils import StructuredLogger
from calcservice.shared.models import CalculationRecord, HealthStatus


class MongoHistoryStore(IHistoryStore):
    """Persistent MongoDB history store."""

    def __init__(
        self,
        config: MongoConfig,
        logger: StructuredLogger,
        client: Optional[AsyncMongoClient] = None,
    ):
        self._config = config
        self._logger = logger
        self._client = client

    def _get_client(self) -> AsyncMongoClient:
        if self._client is None:
            self._client = AsyncMongoClient(
                self._config.uri,
                serverSelectionTimeoutMS=self._config.timeout_ms,
                connectTimeoutMS=self._config.timeout_ms,
                socketTimeoutMS=self._config.timeout_ms,
                tz_aware=True,
            )
        return self._client

    @property
    def _collection(self):
        return self._get_client()[self._config.database][self._config.collection]

    async def connect(self) -> None:
        try:
            await self._get_client().admin.command("ping")
        except PyMongoError as e:
            self._logger.error(
                "MongoDB connection error",
                host=self._config.host, port=self._config.port, error=str(e),
            )
            return
        self._logger.info(
            "Connected to MongoDB",
            host=self._config.host, database=self._config.database,
        )

    async def close(self) -> None:
        if self._client is not None:
            await self._client.close()
            self._client = None
            self._logger.info("MongoDB connection closed")

    async def append(self, record: CalculationRecord) -> CalculationRecord:
        stamped = record.stamped()
        try:
            await self._collection.insert_one(stamped.to_document())
        except PyMongoError as e:
            raise StorageError(f"Error saving calculation: {e}") from e
        self._logger.info(
            f"Saved {stamped.operation.value} calculation to database",
        )
        return stamped

    async def recent(self, limit: int = DEFAULT_HISTORY_LIMIT) -> list[CalculationRecord]:
        if limit <= 0:
            return []
        try:
            cursor = (
                self._collection.find({}, {"_id": 0})
                .sort([("timestamp", DESCENDING), ("_id", DESCENDING)])
                .limit(limit)
            )
            documents = await cursor.to_list(length=limit)
        except PyMongoError as e:
            raise StorageError(f"Error fetching calculation history: {e}") from e

        records = []
        for doc in documents:
            try:
                records.append(CalculationRecord.from_dict(doc))
            except (KeyError, TypeError, ValueError) as e:
                self._logger.error("Skipping malformed history document", error=str(e))
        return records

    async def health_status(self) -> HealthStatus:
        client = self._get_client()
        try:
            await client.admin.command("ping")
            names = await client[self._config.database].list_collection_names()
        except PyMongoError as e:
            self._logger.warning("MongoDB health check failed", error=str(e))
            return HealthStatus(connected=False, db_name=self._config.database)
        return HealthStatus(
            connected=True,
            db_name=self._config.database,
            collection_count=len(names),
        )
