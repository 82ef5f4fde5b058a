"""Services package - business logic layer."""

from .appointment_store import AppointmentStore
from .slot_allocator import SlotAllocator
from .appointment_lifecycle import AppointmentLifecycle, validate_transition
from .appointment_service import AppointmentService
from .admin_service import AdminService
from .auth_service import AuthService

__all__ = [
    "AppointmentStore",
    "SlotAllocator",
    "AppointmentLifecycle",
    "validate_transition",
    "AppointmentService",
    "AdminService",
    "AuthService",
]
