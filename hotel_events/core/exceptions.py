"""
Domain errors raised by the service layer.

Each error carries the HTTP status the API layer answers with, so routers can
let them propagate and the application-wide handler turns them into an
``ErrorResponse`` body.
"""

from fastapi import status


class ReservationError(Exception):
    """Base class for every error the services raise on purpose."""

    status_code = status.HTTP_400_BAD_REQUEST
    error = "reservation_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(ReservationError):
    status_code = status.HTTP_404_NOT_FOUND
    error = "not_found"


class ConflictError(ReservationError):
    status_code = status.HTTP_409_CONFLICT
    error = "conflict"


class VenueUnavailableError(ReservationError):
    status_code = status.HTTP_409_CONFLICT
    error = "venue_unavailable"


class InvalidStateError(ReservationError):
    status_code = status.HTTP_409_CONFLICT
    error = "invalid_state"


class ValidationError(ReservationError):
    status_code = status.HTTP_400_BAD_REQUEST
    error = "validation_error"
