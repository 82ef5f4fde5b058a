from sqlalchemy.orm import Session
from datetime import date, time
from typing import Optional

from ..models.appointment import Appointment, AppointmentStatus

class AppointmentStore:
    """Persistence operations the booking core relies on.

    ``insert`` and ``update_status`` each commit their own unit of work.
    Uniqueness of an active slot is enforced by the
    ``uq_appointments_active_slot`` partial index, so ``insert`` lets the
    resulting ``IntegrityError`` propagate to the caller.
    """

    def __init__(self, db: Session):
        self.db = db

    def find_by_id(self, appointment_id: int) -> Optional[Appointment]:
        return self.db.query(Appointment).filter(
            Appointment.id == appointment_id
        ).first()

    def find_conflicting(
        self, doctor_id: int, appointment_date: date, appointment_time: time
    ) -> Optional[Appointment]:
        """Return the active appointment holding the slot, if any."""
        return self.db.query(Appointment).filter(
            Appointment.doctor_id == doctor_id,
            Appointment.appointment_date == appointment_date,
            Appointment.appointment_time == appointment_time,
            Appointment.status != AppointmentStatus.CANCELLED
        ).first()

    def insert(self, appointment: Appointment) -> Appointment:
        self.db.add(appointment)
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(appointment)
        return appointment

    def update_status(
        self, appointment: Appointment, new_status: AppointmentStatus
    ) -> Optional[Appointment]:
        """Compare-and-set the status against the one last observed.

        Returns None without writing when another writer changed the row
        since ``appointment`` was loaded.
        """
        observed = appointment.status
        updated = self.db.query(Appointment).filter(
            Appointment.id == appointment.id,
            Appointment.status == observed
        ).update(
            {"status": new_status},
            synchronize_session=False
        )

        if updated != 1:
            self.db.rollback()
            return None

        self.db.commit()
        self.db.refresh(appointment)
        return appointment
