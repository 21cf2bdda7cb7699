"""History store factory."""

from calcservice.shared.config import AppConfig, HistoryBackend
from calcservice.shared.interfaces import IHistoryStore
from calcservice.shared.logging_utils import StructuredLogger

from .jsonl_store import JSONLHistoryStore
from .mongo_store import MongoHistoryStore


def create_history_store(config: AppConfig, logger: StructuredLogger) -> IHistoryStore:
    """
    Factory: create the history store selected by HISTORY_BACKEND.

    Supports:
      - HISTORY_BACKEND=mongo → MongoDB (MongoHistoryStore)
      - HISTORY_BACKEND=jsonl → append-only JSONL file (JSONLHistoryStore)
    """
    if config.history.backend == HistoryBackend.JSONL:
        logger.info("Using JSONL history log", path=config.history.file_path)
        return JSONLHistoryStore(config.history, logger.child("jsonl"))

    logger.info(
        "Using MongoDB history store",
        host=config.mongo.host, port=config.mongo.port, database=config.mongo.database,
    )
    return MongoHistoryStore(config.mongo, logger.child("mongo"))
