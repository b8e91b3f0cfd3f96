"""
Booking engine errors.

Every error is terminal for the request that raised it; nothing here is
retried by the engine. Each class carries the HTTP status the API maps it to.
"""

from fastapi import status


class NomadHubError(Exception):
    """Base class for booking and revenue errors"""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Request failed"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    @property
    def code(self) -> str:
        return type(self).__name__


class InvalidAmount(NomadHubError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Amount must be greater than zero"


class AuthorizationFailed(NomadHubError):
    status_code = status.HTTP_402_PAYMENT_REQUIRED
    default_message = "Payment authorization failed"


class RoomNotFound(NomadHubError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Room not found"


class RoomNoLongerAvailable(NomadHubError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Room is no longer available"


class BookingNotFound(NomadHubError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Booking not found"


class NotAuthorized(NomadHubError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Not allowed to modify this booking"


class StoreUnavailable(NomadHubError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_message = "Ledger store unavailable"
