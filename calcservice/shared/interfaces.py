"""
Abstract interfaces (Ports) for CalcService.
Following Dependency Inversion Principle - depend on abstractions, not concretions.
"""

from abc import ABC, abstractmethod

from .constants import DEFAULT_HISTORY_LIMIT
from .models import CalculationRecord, HealthStatus


class IHistoryStore(ABC):
    """Interface for durable calculation history."""

    @abstractmethod
    async def connect(self) -> None:
        """Establish the backend connection. Failures are logged, not raised."""

    @abstractmethod
    async def close(self) -> None:
        """Release the backend connection."""

    @abstractmethod
    async def append(self, record: CalculationRecord) -> CalculationRecord:
        """Persist a record with a server-assigned timestamp.

        Returns the stored record. Raises StorageError on failure.
        """

    @abstractmethod
    async def recent(self, limit: int = DEFAULT_HISTORY_LIMIT) -> list[CalculationRecord]:
        """Return up to ``limit`` records, newest first. Raises StorageError on failure."""

    @abstractmethod
    async def health_status(self) -> HealthStatus:
        """Return current connectivity of the backend."""
