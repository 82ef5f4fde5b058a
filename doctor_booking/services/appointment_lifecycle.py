from sqlalchemy.orm import Session
import logging

from ..core.exceptions import NotFoundError, ForbiddenError, InvalidTransitionError
from ..models.appointment import Appointment, AppointmentStatus
from .appointment_store import AppointmentStore

logger = logging.getLogger(__name__)

# Legal status changes; CANCELLED and COMPLETED are terminal
TRANSITIONS = {
    AppointmentStatus.PENDING: {
        AppointmentStatus.CONFIRMED,
        AppointmentStatus.CANCELLED,
        AppointmentStatus.COMPLETED,
    },
    AppointmentStatus.CONFIRMED: {
        AppointmentStatus.CANCELLED,
        AppointmentStatus.COMPLETED,
    },
    AppointmentStatus.CANCELLED: set(),
    AppointmentStatus.COMPLETED: set(),
}

def validate_transition(current: AppointmentStatus, target: AppointmentStatus) -> None:
    """Raise InvalidTransitionError unless ``current -> target`` is legal."""
    if target in TRANSITIONS[current]:
        return

    if target == AppointmentStatus.CANCELLED:
        if current == AppointmentStatus.COMPLETED:
            raise InvalidTransitionError("Cannot cancel a completed appointment")
        if current == AppointmentStatus.CANCELLED:
            raise InvalidTransitionError("Appointment is already cancelled")

    if target == AppointmentStatus.COMPLETED:
        if current == AppointmentStatus.COMPLETED:
            raise InvalidTransitionError("Appointment is already completed")
        if current == AppointmentStatus.CANCELLED:
            raise InvalidTransitionError("Cannot complete a cancelled appointment")

    raise InvalidTransitionError(
        f"Cannot change appointment status from {current.value} to {target.value}"
    )

class AppointmentLifecycle:
    def __init__(self, db: Session):
        self.db = db
        self.store = AppointmentStore(db)

    def _get(self, appointment_id: int) -> Appointment:
        appointment = self.store.find_by_id(appointment_id)
        if not appointment:
            raise NotFoundError("appointment", appointment_id)
        return appointment

    def cancel_appointment(self, appointment_id: int, requesting_patient_id: int) -> Appointment:
        """Cancel an appointment on behalf of its owning patient."""
        while True:
            appointment = self._get(appointment_id)

            if appointment.patient_id != requesting_patient_id:
                logger.warning(
                    f"Patient {requesting_patient_id} tried to cancel appointment "
                    f"{appointment_id} owned by patient {appointment.patient_id}"
                )
                raise ForbiddenError()

            validate_transition(appointment.status, AppointmentStatus.CANCELLED)

            if self.store.update_status(appointment, AppointmentStatus.CANCELLED):
                logger.info(f"Appointment {appointment_id} cancelled by patient {requesting_patient_id}")
                return appointment

            # Lost a concurrent update; the next pass re-validates the new status
            self.db.expire_all()

    def complete_appointment(self, appointment_id: int) -> Appointment:
        """Administrative transition to COMPLETED."""
        while True:
            appointment = self._get(appointment_id)
            validate_transition(appointment.status, AppointmentStatus.COMPLETED)

            if self.store.update_status(appointment, AppointmentStatus.COMPLETED):
                logger.info(f"Appointment {appointment_id} completed")
                return appointment

            self.db.expire_all()
