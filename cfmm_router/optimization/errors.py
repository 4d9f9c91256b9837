"""Errors raised by routing objectives."""

from typing import Optional


class ObjectiveError(ValueError):
    """Base class for objective errors."""


class InvalidArgument(ObjectiveError):
    """Objective could not be constructed from the given parameters."""


class LengthMismatch(ObjectiveError):
    """
    Argument vector does not have one entry per token.

    Attributes:
        expected: Number of tokens known to the objective
        actual: Length of the vector that was passed in
    """

    def __init__(self, expected: int, actual: Optional[int], what: str = "v"):
        self.expected = expected
        self.actual = actual
        if actual is None:
            message = f"{what} must be one-dimensional with {expected} entries"
        else:
            message = f"{what} has {actual} entries, expected {expected}"
        super().__init__(message)
