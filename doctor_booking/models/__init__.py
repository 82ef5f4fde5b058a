from .user import User, RefreshToken
from .patient import Patient
from .doctor import Doctor, DoctorStatus
from .appointment import Appointment, AppointmentStatus

__all__ = [
    "User",
    "RefreshToken",
    "Patient",
    "Doctor",
    "DoctorStatus",
    "Appointment",
    "AppointmentStatus",
]
