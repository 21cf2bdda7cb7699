"""
Input validation for raw query-string operands.

parse_operands() either returns typed Operands or raises ValidationError;
handlers receive the typed value and never touch raw strings.
"""

import math
from typing import Optional

from calcservice.shared.constants import INVALID_NUM1, INVALID_NUM2
from calcservice.shared.errors import ValidationError
from calcservice.shared.models import Operands


def parse_number(raw: Optional[str]) -> Optional[float]:
    """Parse a query value as a float. Returns None when it is not a number."""
    if raw is None:
        return None
    text = raw.strip()
    if not text or "_" in text:
        return None
    try:
        value = float(text)
    except ValueError:
        return None
    if math.isnan(value):
        return None
    # float() also takes "inf" and any-case "infinity"; only "Infinity" is a number here
    word = text.lstrip("+-")
    if word.lower() in ("inf", "infinity") and word != "Infinity":
        return None
    return value


def parse_operands(
    num1: Optional[str],
    num2: Optional[str] = None,
    require_num2: bool = False,
) -> Operands:
    """
    Validate ``num1`` (required) and ``num2`` (optional unless
    ``require_num2``). A literal zero is a valid value, distinct from absent.
    """
    first = parse_number(num1)
    if first is None:
        raise ValidationError(INVALID_NUM1)

    if num2 is None:
        if require_num2:
            raise ValidationError(INVALID_NUM2)
        return Operands(num1=first)

    second = parse_number(num2)
    if second is None:
        raise ValidationError(INVALID_NUM2)
    return Operands(num1=first, num2=second)
