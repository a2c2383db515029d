"""Errors raised by the budget and goal computations."""


class InvalidAmount(ValueError):
    """Raised for a non-positive contribution, a negative allocation or a
    non-positive goal target."""
