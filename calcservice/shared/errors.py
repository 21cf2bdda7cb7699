"""
Error taxonomy for CalcService.

Every error carries the HTTP status it maps to and a message that is safe to
return to the client as ``{"error": message}``.
"""


class CalculatorError(Exception):
    """Base class for all errors surfaced by the service."""
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(CalculatorError):
    """Malformed or missing numeric input."""
    status_code = 400


class DomainError(CalculatorError):
    """Input is numeric but outside the operation's domain."""
    status_code = 400


class DivideByZeroError(DomainError):
    pass


class NegativeInputError(DomainError):
    pass


class InvalidInputError(DomainError):
    pass


class NonPositiveInputError(DomainError):
    pass


class InvalidBaseError(DomainError):
    pass


class StorageError(CalculatorError):
    """Append or read failure against the history backend."""
    status_code = 500
