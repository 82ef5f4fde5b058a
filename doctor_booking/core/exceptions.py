"""Failure kinds raised by the booking core.

Every booking or lifecycle failure is a ``BookingError``. The HTTP layer maps
``status_code`` and ``error`` onto the response; the core itself never talks
in transport terms beyond that attribute.
"""
from fastapi import status


class BookingError(Exception):
    status_code: int = status.HTTP_400_BAD_REQUEST
    error: str = "BookingError"

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class NotFoundError(BookingError):
    status_code = status.HTTP_404_NOT_FOUND
    error = "NotFound"

    def __init__(self, entity: str, entity_id=None):
        self.entity = entity
        self.entity_id = entity_id
        if entity_id is None:
            super().__init__(f"{entity.capitalize()} not found")
        else:
            super().__init__(f"{entity.capitalize()} not found with id: {entity_id}")


class DoctorUnavailableError(BookingError):
    status_code = status.HTTP_409_CONFLICT
    error = "DoctorUnavailable"

    def __init__(self, detail: str = "Doctor is not active"):
        super().__init__(detail)


class SlotTakenError(BookingError):
    status_code = status.HTTP_409_CONFLICT
    error = "SlotTaken"

    def __init__(self, detail: str = "Appointment slot is already taken"):
        super().__init__(detail)


class PastDateError(BookingError):
    status_code = status.HTTP_400_BAD_REQUEST
    error = "PastDate"

    def __init__(self, detail: str = "Cannot book appointment in the past"):
        super().__init__(detail)


class ForbiddenError(BookingError):
    status_code = status.HTTP_403_FORBIDDEN
    error = "Forbidden"

    def __init__(self, detail: str = "Appointment does not belong to this patient"):
        super().__init__(detail)


class InvalidTransitionError(BookingError):
    status_code = status.HTTP_409_CONFLICT
    error = "InvalidTransition"

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(reason)
