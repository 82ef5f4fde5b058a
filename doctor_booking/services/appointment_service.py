"""Read side of appointments: listings with doctor and patient names resolved."""

from sqlalchemy.orm import Session
from datetime import date
from typing import List, Optional

from ..core.exceptions import NotFoundError, ForbiddenError
from ..models.appointment import Appointment
from ..models.doctor import Doctor
from ..models.patient import Patient
from ..schemas.appointment import AppointmentResponse


class AppointmentService:
    def __init__(self, db: Session):
        self.db = db

    def to_response(self, appointment: Appointment) -> AppointmentResponse:
        return self._to_responses([appointment])[0]

    def _to_responses(self, appointments: List[Appointment]) -> List[AppointmentResponse]:
        # Appointments only hold ids; resolve names in two batched lookups
        doctor_ids = {a.doctor_id for a in appointments}
        patient_ids = {a.patient_id for a in appointments}
        doctors = {}
        patients = {}
        if doctor_ids:
            doctors = {d.id: d for d in self.db.query(Doctor).filter(Doctor.id.in_(doctor_ids))}
        if patient_ids:
            patients = {p.id: p for p in self.db.query(Patient).filter(Patient.id.in_(patient_ids))}

        return [
            AppointmentResponse.from_entity(
                a, patient=patients.get(a.patient_id), doctor=doctors.get(a.doctor_id)
            )
            for a in appointments
        ]

    def get_appointment(self, appointment_id: int) -> AppointmentResponse:
        appointment = self.db.query(Appointment).filter(Appointment.id == appointment_id).first()
        if not appointment:
            raise NotFoundError("appointment", appointment_id)
        return self.to_response(appointment)

    def get_patient_appointment(self, appointment_id: int, patient_id: int) -> AppointmentResponse:
        """One appointment, visible only to its owning patient."""
        appointment = self.db.query(Appointment).filter(Appointment.id == appointment_id).first()
        if not appointment:
            raise NotFoundError("appointment", appointment_id)
        if appointment.patient_id != patient_id:
            raise ForbiddenError()
        return self.to_response(appointment)

    def list_appointments(self, appointment_date: Optional[date] = None) -> List[AppointmentResponse]:
        """All appointments, optionally restricted to one date."""
        query = self.db.query(Appointment)
        if appointment_date:
            query = query.filter(Appointment.appointment_date == appointment_date)
        query = query.order_by(Appointment.appointment_date, Appointment.appointment_time)
        return self._to_responses(query.all())

    def list_patient_appointments(self, patient_id: int) -> List[AppointmentResponse]:
        """Booking history of a patient, newest slot first."""
        appointments = self.db.query(Appointment).filter(
            Appointment.patient_id == patient_id
        ).order_by(
            Appointment.appointment_date.desc(),
            Appointment.appointment_time.desc()
        ).all()
        return self._to_responses(appointments)

    def list_doctor_appointments(
        self, doctor_id: int, appointment_date: Optional[date] = None
    ) -> List[AppointmentResponse]:
        query = self.db.query(Appointment).filter(Appointment.doctor_id == doctor_id)
        if appointment_date:
            query = query.filter(Appointment.appointment_date == appointment_date)
        query = query.order_by(Appointment.appointment_date, Appointment.appointment_time)
        return self._to_responses(query.all())
