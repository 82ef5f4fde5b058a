from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from datetime import date, time
from typing import Callable, Optional
import logging

from ..core.exceptions import (
    NotFoundError, DoctorUnavailableError, SlotTakenError, PastDateError
)
from ..models.appointment import Appointment, AppointmentStatus
from ..models.doctor import Doctor, DoctorStatus
from ..models.patient import Patient
from .appointment_store import AppointmentStore

logger = logging.getLogger(__name__)

class SlotAllocator:
    """Grants a (doctor, date, time) slot to a patient.

    The conflict lookup and the insert form one unit: when a concurrent
    booking commits first, the store's active-slot index rejects the insert
    and, once a second lookup sees the competitor, the failure surfaces as
    ``SlotTakenError``, the same as a conflict seen by the lookup.
    """

    def __init__(self, db: Session, today: Optional[Callable[[], date]] = None):
        self.db = db
        self.store = AppointmentStore(db)
        self._today = today or date.today

    def book_appointment(
        self,
        patient_id: int,
        doctor_id: int,
        appointment_date: date,
        appointment_time: time,
        notes: Optional[str] = None
    ) -> Appointment:
        """Reserve the slot and return the new PENDING appointment."""
        patient = self.db.query(Patient).filter(Patient.id == patient_id).first()
        if not patient:
            raise NotFoundError("patient", patient_id)

        doctor = self.db.query(Doctor).filter(Doctor.id == doctor_id).first()
        if not doctor:
            raise NotFoundError("doctor", doctor_id)

        if doctor.status != DoctorStatus.ACTIVE:
            logger.warning(f"Booking rejected: doctor {doctor_id} is {doctor.status.value}")
            raise DoctorUnavailableError()

        if self.store.find_conflicting(doctor_id, appointment_date, appointment_time):
            logger.warning(
                f"Booking rejected: slot {appointment_date} {appointment_time} "
                f"of doctor {doctor_id} is taken"
            )
            raise SlotTakenError()

        if appointment_date < self._today():
            raise PastDateError()

        appointment = Appointment(
            patient_id=patient_id,
            doctor_id=doctor_id,
            appointment_date=appointment_date,
            appointment_time=appointment_time,
            status=AppointmentStatus.PENDING,
            notes=notes
        )

        try:
            appointment = self.store.insert(appointment)
        except IntegrityError:
            # Only a committed competitor for the slot counts as SlotTaken
            if not self.store.find_conflicting(doctor_id, appointment_date, appointment_time):
                logger.error(f"Booking insert failed for patient {patient_id}, doctor {doctor_id}")
                raise
            logger.warning(
                f"Booking lost race for slot {appointment_date} {appointment_time} "
                f"of doctor {doctor_id}"
            )
            raise SlotTakenError()

        logger.info(
            f"Appointment {appointment.id} booked: patient {patient_id}, doctor {doctor_id}, "
            f"{appointment_date} {appointment_time}"
        )
        return appointment
