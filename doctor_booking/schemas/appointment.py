from pydantic import BaseModel, Field
from datetime import date, datetime, time
from typing import Optional

from ..models.appointment import Appointment, AppointmentStatus


class AppointmentCreate(BaseModel):
    doctor_id: int
    appointment_date: date = Field(..., description="Appointment date (YYYY-MM-DD)")
    appointment_time: time = Field(..., description="Appointment time (HH:MM)")
    notes: Optional[str] = Field(None, max_length=1000)


class AppointmentResponse(BaseModel):
    id: int
    patient_id: int
    patient_name: Optional[str] = None
    doctor_id: int
    doctor_name: Optional[str] = None
    specialization: Optional[str] = None
    appointment_date: date
    appointment_time: time
    status: AppointmentStatus
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, appointment: Appointment, patient=None, doctor=None) -> "AppointmentResponse":
        """Build a response from an appointment and its optionally resolved references."""
        return cls(
            id=appointment.id,
            patient_id=appointment.patient_id,
            patient_name=patient.full_name if patient else None,
            doctor_id=appointment.doctor_id,
            doctor_name=doctor.full_name if doctor else None,
            specialization=doctor.specialization if doctor else None,
            appointment_date=appointment.appointment_date,
            appointment_time=appointment.appointment_time,
            status=appointment.status,
            notes=appointment.notes,
            created_at=appointment.created_at,
            updated_at=appointment.updated_at,
        )
