from __future__ import annotations


class InvalidInputError(ValueError):
    """Raised when an input makes a computation undefined (e.g. a zero-length term)."""


class DivisionByZeroError(InvalidInputError, ZeroDivisionError):
    """Raised when a dollar amount is expressed as a percent of a zero home price."""
