"""
Calculation handler: validate -> evaluate -> log -> record.

The history append is awaited before the response is built, but a
StorageError is logged and dropped so a storage outage never changes the
arithmetic result returned to the client.
"""

from typing import Optional

from calcservice.evaluator.operations import evaluate
from calcservice.evaluator.validation import parse_operands
from calcservice.shared.constants import DEFAULT_HISTORY_LIMIT
from calcservice.shared.errors import CalculatorError, StorageError
from calcservice.shared.interfaces import IHistoryStore
from calcservice.shared.logging_utils import StructuredLogger
from calcservice.shared.models import CalculationRecord, HealthStatus, OperationType

_DESCRIPTIONS = {
    OperationType.ADD: "Addition operation: {a} + {b} = {r}",
    OperationType.SUBTRACT: "Subtraction operation: {a} - {b} = {r}",
    OperationType.MULTIPLY: "Multiplication operation: {a} * {b} = {r}",
    OperationType.DIVIDE: "Division operation: {a} / {b} = {r}",
    OperationType.EXPONENTIATE: "Exponentiation operation: {a} ^ {b} = {r}",
    OperationType.SQRT: "Square root operation: sqrt({a}) = {r}",
    OperationType.MODULO: "Modulo operation: {a} % {b} = {r}",
    OperationType.FACTORIAL: "Factorial operation: {a}! = {r}",
}


def describe(op: OperationType, num1: float, num2: Optional[float], result: float) -> str:
    """Human-readable one-line summary of a computation."""
    if op == OperationType.LOG:
        if num2 is None:
            return f"Natural logarithm operation: ln({num1}) = {result}"
        return f"Logarithm operation: log_{num2}({num1}) = {result}"
    return _DESCRIPTIONS[op].format(a=num1, b=num2, r=result)


class CalculationHandler:
    """Runs one calculation request end to end against an injected store."""

    def __init__(
        self,
        store: IHistoryStore,
        logger: StructuredLogger,
        history_limit: int = DEFAULT_HISTORY_LIMIT,
    ):
        self._store = store
        self._logger = logger
        self._history_limit = history_limit

    @property
    def store(self) -> IHistoryStore:
        return self._store

    async def calculate(
        self,
        op: OperationType,
        num1: Optional[str],
        num2: Optional[str] = None,
    ) -> float:
        """Validate raw query values, compute, and record the result.

        Raises ValidationError or DomainError; never StorageError.
        """
        try:
            operands = parse_operands(
                num1,
                None if op.is_unary else num2,
                require_num2=op.is_binary,
            )
            result = evaluate(op, operands.num1, operands.num2)
        except CalculatorError as e:
            self._logger.error(e.message, operation=op.value)
            raise

        self._logger.info(describe(op, operands.num1, operands.num2, result))
        await self._record(CalculationRecord(
            operation=op,
            num1=operands.num1,
            num2=operands.num2,
            result=result,
        ))
        return result

    async def _record(self, record: CalculationRecord) -> None:
        try:
            await self._store.append(record)
        except StorageError as e:
            self._logger.error(
                "Error saving calculation",
                operation=record.operation.value, error=e.message,
            )

    async def history(self, limit: Optional[int] = None) -> list[CalculationRecord]:
        try:
            return await self._store.recent(self._history_limit if limit is None else limit)
        except StorageError as e:
            self._logger.error("Error fetching calculation history", error=e.message)
            raise

    async def db_health(self) -> HealthStatus:
        return await self._store.health_status()
