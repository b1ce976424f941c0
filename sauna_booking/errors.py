"""
Booking error taxonomy.

Services raise these; the application registers a single handler that turns
them into ``{"error": message}`` responses with the matching status code.
Messages are safe to show to the person making the request.
"""


class BookingError(Exception):
    """Base class for errors surfaced to API callers"""

    status_code = 400
    default_message = "Bad request"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(BookingError):
    """Malformed or out-of-range input, rejected before touching the store"""

    status_code = 400
    default_message = "Invalid request"


class AuthorizationError(BookingError):
    """Admin token missing or mismatched"""

    status_code = 401
    default_message = "Unauthorized"


class NotFoundError(BookingError):
    status_code = 404
    default_message = "Not found"


class ConflictError(BookingError):
    """Slot state does not allow the request; caller must re-fetch availability"""

    status_code = 409
    default_message = "Slot is not available"


class StoreError(BookingError):
    """Persistence failure. Detail is logged, never returned."""

    status_code = 500
    default_message = "Internal server error"
