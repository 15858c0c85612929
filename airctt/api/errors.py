"""
Application errors

Every business error derives from ``AppError``; ``airctt.main`` renders them
all with one exception handler as ``{"error": message, "code": code}``.
The subclasses carry the default code and HTTP status of each error kind, so
ledger code only supplies a message.
"""
from __future__ import annotations


class AppError(Exception):
    """
    Base application error

    Carries:
    - code: business error code (lets clients tell errors apart)
    - message: human readable message
    - status_code: HTTP status (400, 404, 500 ...)

    Example:
        raise AppError(code=402001, message="Insufficient points", status_code=400)
    """

    default_code = 500000
    default_status = 500
    default_message = "Internal server error"

    def __init__(
        self,
        message: str | None = None,
        *,
        code: int | None = None,
        status_code: int | None = None,
    ) -> None:
        message = message or self.default_message
        super().__init__(message)
        self.code = code if code is not None else self.default_code
        self.message = message
        self.status_code = status_code if status_code is not None else self.default_status


class InvalidInput(AppError):
    """A required field is missing or malformed."""

    default_code = 400001
    default_status = 400
    default_message = "Missing parameters"


class NotFound(AppError):
    """A referenced entity does not exist."""

    default_code = 404001
    default_status = 404
    default_message = "Not found"


class InvalidState(AppError):
    """The entity's current state does not allow the operation."""

    default_code = 400101
    default_status = 400
    default_message = "Operation not allowed in the current state"


class AlreadyClaimed(AppError):
    default_code = 400201
    default_status = 400
    default_message = "Reward already claimed"


class InsufficientPoints(AppError):
    # Sent as 400; the 402 lives only in the business code.
    default_code = 402001
    default_status = 400
    default_message = "Insufficient points"


class NoTemplateAvailable(AppError):
    default_code = 409001
    default_status = 409
    default_message = "No active coupon template available for this reward"


class PersistenceError(AppError):
    """The database rejected or failed a statement."""

    default_code = 500001
    default_status = 500
    default_message = "Database error"


class InconsistentState(AppError):
    """A required join did not resolve, e.g. a reward whose session lost its consumer."""

    default_code = 500002
    default_status = 500
    default_message = "Inconsistent state"


def coupon_not_usable(status: str) -> InvalidState:
    """
    Build the redemption error for a coupon that is not ISSUED

    Args:
        status: current coupon status, embedded in the message

    Returns:
        InvalidState instance
    """
    return InvalidState(f"Coupon cannot be used. Status: {status}")
