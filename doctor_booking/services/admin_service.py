from sqlalchemy import or_
from sqlalchemy.orm import Session
from fastapi import HTTPException, status
from typing import List, Optional
import logging

from ..core.exceptions import NotFoundError
from ..core.security import UserRole
from ..models.appointment import Appointment
from ..models.doctor import Doctor, DoctorStatus
from ..models.patient import Patient
from ..schemas.doctor import DoctorCreate, DoctorUpdate
from ..schemas.patient import PatientUpdate
from .auth_service import AuthService

logger = logging.getLogger(__name__)

class AdminService:
    """Doctor and patient management and lookups."""

    def __init__(self, db: Session):
        self.db = db

    # Doctors
    def list_doctors(
        self, keyword: Optional[str] = None, doctor_status: Optional[DoctorStatus] = None
    ) -> List[Doctor]:
        query = self.db.query(Doctor)
        if keyword:
            pattern = f"%{keyword}%"
            query = query.filter(or_(
                Doctor.first_name.ilike(pattern),
                Doctor.last_name.ilike(pattern),
                Doctor.specialization.ilike(pattern)
            ))
        if doctor_status:
            query = query.filter(Doctor.status == doctor_status)
        return query.order_by(Doctor.last_name, Doctor.first_name).all()

    def get_doctor(self, doctor_id: int) -> Doctor:
        doctor = self.db.query(Doctor).filter(Doctor.id == doctor_id).first()
        if not doctor:
            raise NotFoundError("doctor", doctor_id)
        return doctor

    def get_active_doctor(self, doctor_id: int) -> Doctor:
        """Doctor as seen by patients; inactive doctors are not found."""
        doctor = self.db.query(Doctor).filter(
            Doctor.id == doctor_id,
            Doctor.status == DoctorStatus.ACTIVE
        ).first()
        if not doctor:
            raise NotFoundError("doctor", doctor_id)
        return doctor

    def create_doctor(self, doctor_data: DoctorCreate) -> Doctor:
        """Create a doctor profile and its login account."""
        user = AuthService(self.db).create_user(
            doctor_data.email, doctor_data.password, UserRole.DOCTOR
        )

        doctor = Doctor(
            user_id=user.id,
            **doctor_data.model_dump(exclude={"email", "password"})
        )
        self.db.add(doctor)
        self.db.commit()
        self.db.refresh(doctor)

        logger.info(f"Created doctor {doctor.id} ({doctor.specialization})")
        return doctor

    def update_doctor(self, doctor_id: int, doctor_data: DoctorUpdate) -> Doctor:
        doctor = self.get_doctor(doctor_id)
        for field, value in doctor_data.model_dump(exclude_unset=True).items():
            setattr(doctor, field, value)
        self.db.commit()
        self.db.refresh(doctor)

        logger.info(f"Updated doctor {doctor.id}")
        return doctor

    def delete_doctor(self, doctor_id: int) -> None:
        """Delete a doctor who has never been booked."""
        doctor = self.get_doctor(doctor_id)

        # Appointments are never deleted, so a booked doctor cannot be either
        booked = self.db.query(Appointment.id).filter(
            Appointment.doctor_id == doctor_id
        ).first()
        if booked:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Doctor has appointments; set status to INACTIVE instead"
            )

        user = doctor.user
        self.db.delete(doctor)
        if user:
            self.db.delete(user)
        self.db.commit()
        logger.info(f"Deleted doctor {doctor_id}")

    # Patients
    def list_patients(self, keyword: Optional[str] = None) -> List[Patient]:
        query = self.db.query(Patient)
        if keyword:
            pattern = f"%{keyword}%"
            query = query.filter(or_(
                Patient.first_name.ilike(pattern),
                Patient.last_name.ilike(pattern),
                Patient.phone_number.ilike(pattern)
            ))
        return query.order_by(Patient.last_name, Patient.first_name).all()

    def get_patient(self, patient_id: int) -> Patient:
        patient = self.db.query(Patient).filter(Patient.id == patient_id).first()
        if not patient:
            raise NotFoundError("patient", patient_id)
        return patient

    def update_patient(self, patient_id: int, patient_data: PatientUpdate) -> Patient:
        patient = self.get_patient(patient_id)
        for field, value in patient_data.model_dump(exclude_unset=True).items():
            setattr(patient, field, value)
        self.db.commit()
        self.db.refresh(patient)

        logger.info(f"Updated patient {patient.id}")
        return patient
