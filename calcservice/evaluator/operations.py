"""
Operation evaluator: the nine arithmetic operations.

Every function is pure and deterministic. Domain violations raise a
DomainError subclass carrying the client-facing message; floating-point
edge cases (overflow, NaN) are returned as values, not raised.
"""

import math
from typing import Callable, Optional, Union

from calcservice.shared.constants import (
    DIVIDE_BY_ZERO,
    FACTORIAL_INVALID,
    INVALID_NUM2,
    LOG_INVALID_BASE,
    LOG_NON_POSITIVE,
    MODULO_BY_ZERO,
    NEGATIVE_SQRT,
)
from calcservice.shared.errors import (
    DivideByZeroError,
    InvalidBaseError,
    InvalidInputError,
    NegativeInputError,
    NonPositiveInputError,
    ValidationError,
)
from calcservice.shared.models import OperationType


def _is_odd_integer(value: float) -> bool:
    return float(value).is_integer() and value % 2 == 1


def add(a: float, b: float) -> float:
    return a + b


def subtract(a: float, b: float) -> float:
    return a - b


def multiply(a: float, b: float) -> float:
    return a * b


def divide(a: float, b: float) -> float:
    if b == 0:
        raise DivideByZeroError(DIVIDE_BY_ZERO)
    return a / b


def exponentiate(a: float, b: float) -> float:
    """``a ** b`` with IEEE-754 results instead of Python exceptions."""
    try:
        return math.pow(a, b)
    except OverflowError:
        if a < 0 and _is_odd_integer(b):
            return -math.inf
        return math.inf
    except ValueError:
        # zero to a negative power
        if a == 0 and b < 0:
            if _is_odd_integer(b):
                return math.copysign(math.inf, a)
            return math.inf
        # negative base with fractional exponent
        return math.nan


def sqrt(a: float) -> float:
    if a < 0:
        raise NegativeInputError(NEGATIVE_SQRT)
    return math.sqrt(a)


def modulo(a: float, b: float) -> float:
    """Truncating remainder: the sign of the result follows the dividend."""
    if b == 0:
        raise DivideByZeroError(MODULO_BY_ZERO)
    try:
        return math.fmod(a, b)
    except ValueError:
        # infinite dividend
        return math.nan


def factorial(a: float) -> float:
    """Iterative product of 2..a. Large inputs overflow to inf."""
    if a < 0 or not float(a).is_integer():
        raise InvalidInputError(FACTORIAL_INVALID)
    result = 1.0
    for i in range(2, int(a) + 1):
        result *= i
        if math.isinf(result):
            break
    return result


def log(a: float, base: Optional[float] = None) -> float:
    """Natural log of ``a``, or log of ``a`` in ``base`` when one is given."""
    if a <= 0:
        raise NonPositiveInputError(LOG_NON_POSITIVE)
    if base is None:
        return math.log(a)
    if base <= 0 or base == 1:
        raise InvalidBaseError(LOG_INVALID_BASE)
    return math.log(a) / math.log(base)


BINARY_FUNCTIONS: dict[OperationType, Callable[[float, float], float]] = {
    OperationType.ADD: add,
    OperationType.SUBTRACT: subtract,
    OperationType.MULTIPLY: multiply,
    OperationType.DIVIDE: divide,
    OperationType.EXPONENTIATE: exponentiate,
    OperationType.MODULO: modulo,
}

UNARY_FUNCTIONS: dict[OperationType, Callable[[float], float]] = {
    OperationType.SQRT: sqrt,
    OperationType.FACTORIAL: factorial,
}


def evaluate(
    op: Union[OperationType, str],
    num1: float,
    num2: Optional[float] = None,
) -> float:
    """
    Compute ``op`` over the operands.

    Binary operations require ``num2``; sqrt and factorial ignore it;
    log treats it as an optional base.
    """
    op = OperationType(op)
    if op in BINARY_FUNCTIONS:
        if num2 is None:
            raise ValidationError(INVALID_NUM2)
        return BINARY_FUNCTIONS[op](num1, num2)
    if op in UNARY_FUNCTIONS:
        return UNARY_FUNCTIONS[op](num1)
    return log(num1, num2)
