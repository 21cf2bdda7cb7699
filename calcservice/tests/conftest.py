"""
Shared test fixtures for CalcService test suite.
"""

import logging
import os
import sys
import tempfile

import pytest

# Ensure calcservice is importable
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

from calcservice.shared.config import (
    AppConfig, HistoryBackend, HistoryConfig, MongoConfig,
)
from calcservice.shared.constants import DEFAULT_HISTORY_LIMIT
from calcservice.shared.errors import StorageError
from calcservice.shared.interfaces import IHistoryStore
from calcservice.shared.logging_utils import StructuredLogger
from calcservice.shared.models import CalculationRecord, HealthStatus


class InMemoryHistoryStore(IHistoryStore):
    """In-process fake: list-backed, newest last."""

    def __init__(self):
        self.records: list[CalculationRecord] = []
        self.connected = False
        self.closed = False

    async def connect(self) -> None:
        self.connected = True

    async def close(self) -> None:
        self.closed = True

    async def append(self, record: CalculationRecord) -> CalculationRecord:
        stamped = record.stamped()
        self.records.append(stamped)
        return stamped

    async def recent(self, limit: int = DEFAULT_HISTORY_LIMIT) -> list[CalculationRecord]:
        return list(reversed(self.records))[:limit]

    async def health_status(self) -> HealthStatus:
        return HealthStatus(connected=self.connected, db_name="memory", collection_count=1)


class FailingHistoryStore(InMemoryHistoryStore):
    """Every storage operation fails."""

    async def append(self, record: CalculationRecord) -> CalculationRecord:
        raise StorageError("connection refused")

    async def recent(self, limit: int = DEFAULT_HISTORY_LIMIT) -> list[CalculationRecord]:
        raise StorageError("connection refused")

    async def health_status(self) -> HealthStatus:
        raise StorageError("connection refused")


@pytest.fixture
def tmp_dir():
    with tempfile.TemporaryDirectory() as d:
        yield d


@pytest.fixture
def logger():
    return StructuredLogger(logging.getLogger("calcservice.tests"), service="test")


@pytest.fixture
def memory_store():
    return InMemoryHistoryStore()


@pytest.fixture
def failing_store():
    return FailingHistoryStore()


@pytest.fixture
def history_config(tmp_dir):
    return HistoryConfig(
        backend=HistoryBackend.JSONL,
        file_path=os.path.join(tmp_dir, "data", "calculations.jsonl"),
    )


@pytest.fixture
def mongo_config():
    return MongoConfig(host="localhost", database="calculator_test", timeout_ms=100)


@pytest.fixture
def app_config(history_config, mongo_config):
    return AppConfig(
        mongo=mongo_config,
        history=history_config,
        log_file_dir="",
        environment="test",
    )
