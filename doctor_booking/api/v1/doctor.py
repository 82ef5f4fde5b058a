from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from datetime import date
from typing import List, Optional

from ...core.database import get_db
from ...api.deps import get_current_doctor
from ...models.doctor import Doctor
from ...schemas.appointment import AppointmentResponse
from ...schemas.doctor import DoctorResponse
from ...schemas.patient import PatientResponse
from ...services.admin_service import AdminService
from ...services.appointment_service import AppointmentService

router = APIRouter(prefix="/doctor", tags=["Doctor"])

@router.get("/profile", response_model=DoctorResponse)
async def get_profile(doctor: Doctor = Depends(get_current_doctor)):
    return DoctorResponse.model_validate(doctor)

@router.get("/appointments", response_model=List[AppointmentResponse])
async def list_my_appointments(
    appointment_date: Optional[date] = Query(None, alias="date"),
    db: Session = Depends(get_db),
    doctor: Doctor = Depends(get_current_doctor)
):
    """Appointments booked with the current doctor, optionally for one day."""
    return AppointmentService(db).list_doctor_appointments(doctor.id, appointment_date)

@router.get("/patients", response_model=List[PatientResponse])
async def search_patients(
    keyword: Optional[str] = None,
    db: Session = Depends(get_db),
    doctor: Doctor = Depends(get_current_doctor)
):
    """Patient lookup by name or phone number."""
    return [PatientResponse.model_validate(p) for p in AdminService(db).list_patients(keyword)]

@router.get("/patients/{patient_id}", response_model=PatientResponse)
async def get_patient(
    patient_id: int,
    db: Session = Depends(get_db),
    doctor: Doctor = Depends(get_current_doctor)
):
    return PatientResponse.model_validate(AdminService(db).get_patient(patient_id))
