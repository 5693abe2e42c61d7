# ============================================================================
# slotbook/services/booking/exceptions.py
# Error taxonomy raised by the booking engine and rendered by the API layer
# ============================================================================
from typing import Optional


class BookingError(Exception):
    """Base class for every error the engine reports to callers."""
    status_code = 400
    error = "booking_error"

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field

    def to_dict(self) -> dict:
        body = {"detail": self.message, "error": self.error}
        if self.field:
            body["field"] = self.field
        return body


class ValidationError(BookingError):
    """Malformed input, rejected before any shared state is read."""
    status_code = 400
    error = "validation_error"


class NotFoundError(BookingError):
    """Unknown business, service, booking or token."""
    status_code = 404
    error = "not_found"


class SlotConflictError(BookingError):
    """The interval is blocked or already at capacity; pick another time."""
    status_code = 409
    error = "slot_conflict"

    def __init__(
            self,
            message: str = "Time slot not available",
            details: str = "This time slot has already been booked. Please select a different time.",
            reason: Optional[str] = None,
    ):
        super().__init__(message)
        self.details = details
        self.reason = reason

    def to_dict(self) -> dict:
        body = super().to_dict()
        body["details"] = self.details
        if self.reason:
            body["reason"] = self.reason
        return body


class TokenExpiredError(BookingError):
    """Modification token is past its expiry; the booking is left unchanged."""
    status_code = 410
    error = "token_expired"


class InvalidTransitionError(BookingError):
    """The requested status change is not allowed from the current status."""
    status_code = 400
    error = "invalid_transition"


class FeatureNotAvailableError(BookingError):
    """The business's subscription tier does not include the feature."""
    status_code = 403
    error = "upgrade_required"
