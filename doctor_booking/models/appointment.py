from sqlalchemy import Column, Integer, ForeignKey, DateTime, Date, Time, Text, Index, Enum as SQLEnum, text
from sqlalchemy.sql import func
import enum

from ..core.database import Base

class AppointmentStatus(str, enum.Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"  # reserved, no operation sets it yet
    CANCELLED = "CANCELLED"
    COMPLETED = "COMPLETED"

# Partial index predicate: cancelled rows free their slot
ACTIVE_SLOT_PREDICATE = text("status != 'CANCELLED'")

class Appointment(Base):
    __tablename__ = "appointments"

    id = Column(Integer, primary_key=True, index=True)

    # References are held by id only
    patient_id = Column(Integer, ForeignKey("patients.id"), nullable=False, index=True)
    doctor_id = Column(Integer, ForeignKey("doctors.id"), nullable=False, index=True)

    # Slot
    appointment_date = Column(Date, nullable=False, index=True)
    appointment_time = Column(Time, nullable=False)

    status = Column(SQLEnum(AppointmentStatus), nullable=False, default=AppointmentStatus.PENDING)
    notes = Column(Text, nullable=True)

    # Tracking
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        # At most one active appointment per (doctor, date, time)
        Index(
            "uq_appointments_active_slot",
            "doctor_id",
            "appointment_date",
            "appointment_time",
            unique=True,
            sqlite_where=ACTIVE_SLOT_PREDICATE,
            postgresql_where=ACTIVE_SLOT_PREDICATE,
        ),
    )

    def __repr__(self):
        return (
            f"<Appointment(id={self.id}, patient_id={self.patient_id}, doctor_id={self.doctor_id}, "
            f"slot='{self.appointment_date} {self.appointment_time}', status='{self.status}')>"
        )
