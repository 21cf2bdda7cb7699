"""Operation evaluator and input validation."""

from .operations import evaluate
from .validation import parse_operands

__all__ = ["evaluate", "parse_operands"]
