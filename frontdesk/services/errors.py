"""
Business-rule errors raised by the booking services.

They subclass ValueError like the rest of the service layer and carry the
HTTP status the API answers with.
"""


class BookingError(ValueError):
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFound(BookingError):
    status_code = 404


class ValidationFailure(BookingError):
    status_code = 400


class RoomUnavailable(BookingError):
    status_code = 400


class InvalidTransition(BookingError):
    status_code = 400


class PermissionDenied(BookingError):
    status_code = 403
