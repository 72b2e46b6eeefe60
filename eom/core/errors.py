# eom/core/errors.py
from typing import Optional


class EomError(Exception):
    """Base class for errors raised by the scoring engine."""


class ValidationError(EomError):
    """Input rejected before anything is written.

    ``field`` names the missing or malformed input so the form can point at it.
    """

    def __init__(self, field: str, message: Optional[str] = None):
        self.field = field
        self.message = message or f"{field} is required"
        super().__init__(self.message)


class NotFoundError(EomError):
    pass


class StoreError(EomError):
    """The record store rejected a read or write."""


class ForbiddenError(EomError):
    """The actor may not act on this subject."""
