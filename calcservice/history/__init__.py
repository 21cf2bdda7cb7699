"""Calculation history stores: MongoDB and append-only JSONL."""

from calcservice.history.factory import create_history_store
from calcservice.history.jsonl_store import JSONLHistoryStore
from calcservice.history.mongo_store import MongoHistoryStore

__all__ = [
    "create_history_store",
    "JSONLHistoryStore",
    "MongoHistoryStore",
]
