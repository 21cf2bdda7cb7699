"""
Named constants: client-facing messages and operational limits.

Messages are kept here so the evaluator, the validator and the tests agree
on the exact text returned in ``{"error": ...}`` bodies.
"""

# ── History ──────────────────────────────────────────────────

DEFAULT_HISTORY_LIMIT = 100
"""Maximum number of records returned by /history."""

# ── Validation messages ──────────────────────────────────────

INVALID_NUM1 = "Invalid input for num1"
INVALID_NUM2 = "Invalid input for num2"

# ── Domain messages ──────────────────────────────────────────

DIVIDE_BY_ZERO = "Cannot divide by zero"
MODULO_BY_ZERO = "Cannot perform modulo by zero"
NEGATIVE_SQRT = "Cannot calculate the square root of a negative number"
FACTORIAL_INVALID = "Factorial requires a non-negative integer"
LOG_NON_POSITIVE = "Cannot calculate logarithm of a non-positive number"
LOG_INVALID_BASE = "Logarithm base must be positive and not equal to 1"

# ── Storage messages ─────────────────────────────────────────

HISTORY_READ_FAILED = "Failed to retrieve calculation history"
DB_HEALTH_FAILED = "Failed to retrieve database health"
INTERNAL_ERROR = "Internal server error"
