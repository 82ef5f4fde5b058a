from .auth import UserLogin, UserRegister, RefreshTokenRequest, UserResponse, TokenResponse
from .doctor import DoctorCreate, DoctorUpdate, DoctorResponse
from .patient import PatientUpdate, PatientResponse
from .appointment import AppointmentCreate, AppointmentResponse

__all__ = [
    "UserLogin",
    "UserRegister",
    "RefreshTokenRequest",
    "UserResponse",
    "TokenResponse",
    "DoctorCreate",
    "DoctorUpdate",
    "DoctorResponse",
    "PatientUpdate",
    "PatientResponse",
    "AppointmentCreate",
    "AppointmentResponse",
]
