# courier/core/errors.py
"""
Domain errors raised by the draft/order services.

Services never raise HTTPException themselves; `courier.main` registers
handlers that turn these into JSON responses.
"""


class CourierError(Exception):
    """Base class for all domain errors."""

    message = "Courier error"

    def __init__(self, message: str | None = None):
        self.message = message or self.message
        super().__init__(self.message)


class ValidationError(CourierError):
    """
    One or more field-level problems in a draft section.

    Recoverable: the caller re-prompts the user, the draft is unchanged.
    """

    message = "Validation failed"

    def __init__(self, errors: list[str], message: str | None = None):
        self.errors = list(errors)
        super().__init__(message)

    def __str__(self) -> str:
        return f"{self.message}: " + "; ".join(self.errors)


class CapacityError(ValidationError):
    """Items would exceed the selected vehicle's maximum weight."""

    message = "Vehicle capacity exceeded"


class StorageError(CourierError):
    """Read/write failure on the draft slot."""

    message = "Draft storage is unavailable"


class SubmissionError(CourierError):
    """Order could not be written; the draft is left intact for a retry."""

    message = "Order submission failed"


class OrderNotFoundError(CourierError):
    message = "Order not found"


class InvalidStatusTransition(CourierError):
    message = "Invalid status transition"


class UserNotFoundError(CourierError):
    message = "User not found"
