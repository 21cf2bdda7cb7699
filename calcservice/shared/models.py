"""
Domain models for CalcService.
Pure data classes with no external dependencies (Clean Architecture inner layer).
"""

import math
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, Union


class OperationType(Enum):
    """The nine supported arithmetic operations."""
    ADD = "add"
    SUBTRACT = "subtract"
    MULTIPLY = "multiply"
    DIVIDE = "divide"
    EXPONENTIATE = "exponentiate"
    SQRT = "sqrt"
    MODULO = "modulo"
    FACTORIAL = "factorial"
    LOG = "log"

    @property
    def is_binary(self) -> bool:
        return self in BINARY_OPERATIONS

    @property
    def is_unary(self) -> bool:
        return self in UNARY_OPERATIONS


BINARY_OPERATIONS = frozenset({
    OperationType.ADD,
    OperationType.SUBTRACT,
    OperationType.MULTIPLY,
    OperationType.DIVIDE,
    OperationType.EXPONENTIATE,
    OperationType.MODULO,
})

# log takes an optional base and is in neither set
UNARY_OPERATIONS = frozenset({
    OperationType.SQRT,
    OperationType.FACTORIAL,
})


# Integral floats in this range are rendered as ints so 5.0 serializes as 5.
_MAX_EXACT_INT = 2 ** 53


def json_number(value: Optional[float]) -> Optional[Union[int, float]]:
    """Render a number for JSON: non-finite as None, integral floats as int."""
    if value is None or math.isinf(value) or math.isnan(value):
        return None
    if float(value).is_integer() and abs(value) < _MAX_EXACT_INT:
        return int(value)
    return value


def _parse_timestamp(value) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        ts = value
    else:
        ts = datetime.fromisoformat(str(value))
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts


@dataclass(frozen=True)
class Operands:
    """Validated numeric inputs for one calculation."""
    num1: float
    num2: Optional[float] = None


@dataclass(frozen=True)
class CalculationRecord:
    """One persisted computation. Immutable once created."""
    operation: OperationType
    num1: float
    result: float
    num2: Optional[float] = None
    timestamp: Optional[datetime] = None

    def stamped(self, when: Optional[datetime] = None) -> "CalculationRecord":
        """Return a copy carrying a timestamp (now, unless one is set or given)."""
        if self.timestamp is not None and when is None:
            return self
        return replace(self, timestamp=when or datetime.now(timezone.utc))

    def to_document(self) -> dict:
        """Storage form: raw floats and a datetime timestamp."""
        doc = {
            "operation": self.operation.value,
            "num1": self.num1,
            "result": self.result,
            "timestamp": self.timestamp,
        }
        if self.num2 is not None:
            doc["num2"] = self.num2
        return doc

    def to_dict(self) -> dict:
        """JSON-safe form returned by the API."""
        data = {
            "operation": self.operation.value,
            "num1": json_number(self.num1),
            "result": json_number(self.result),
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
        }
        if self.num2 is not None:
            data["num2"] = json_number(self.num2)
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "CalculationRecord":
        num2 = data.get("num2")
        result = data.get("result")
        return cls(
            operation=OperationType(data["operation"]),
            num1=float(data["num1"]),
            num2=float(num2) if num2 is not None else None,
            result=float(result) if result is not None else math.nan,
            timestamp=_parse_timestamp(data.get("timestamp")),
        )


@dataclass(frozen=True)
class HealthStatus:
    """Connectivity snapshot of the history backend."""
    connected: bool
    db_name: str
    collection_count: int = 0

    def to_dict(self) -> dict:
        return {
            "status": "Connected" if self.connected else "Disconnected",
            "dbName": self.db_name,
            "collections": self.collection_count,
        }
