from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from datetime import date
from typing import List, Optional

from ...core.database import get_db
from ...api.deps import get_admin_user
from ...models.doctor import DoctorStatus
from ...schemas.appointment import AppointmentResponse
from ...schemas.doctor import DoctorCreate, DoctorUpdate, DoctorResponse
from ...schemas.patient import PatientResponse
from ...services.admin_service import AdminService
from ...services.appointment_lifecycle import AppointmentLifecycle
from ...services.appointment_service import AppointmentService

router = APIRouter(
    prefix="/admin",
    tags=["Admin"],
    dependencies=[Depends(get_admin_user)]
)

# Doctor management
@router.get("/doctors", response_model=List[DoctorResponse])
async def list_doctors(
    keyword: Optional[str] = None,
    doctor_status: Optional[DoctorStatus] = Query(None, alias="status"),
    db: Session = Depends(get_db)
):
    doctors = AdminService(db).list_doctors(keyword, doctor_status=doctor_status)
    return [DoctorResponse.model_validate(d) for d in doctors]

@router.get("/doctors/{doctor_id}", response_model=DoctorResponse)
async def get_doctor(doctor_id: int, db: Session = Depends(get_db)):
    return DoctorResponse.model_validate(AdminService(db).get_doctor(doctor_id))

@router.post("/doctors", response_model=DoctorResponse, status_code=status.HTTP_201_CREATED)
async def create_doctor(doctor_data: DoctorCreate, db: Session = Depends(get_db)):
    return DoctorResponse.model_validate(AdminService(db).create_doctor(doctor_data))

@router.put("/doctors/{doctor_id}", response_model=DoctorResponse)
async def update_doctor(
    doctor_id: int,
    doctor_data: DoctorUpdate,
    db: Session = Depends(get_db)
):
    return DoctorResponse.model_validate(AdminService(db).update_doctor(doctor_id, doctor_data))

@router.delete("/doctors/{doctor_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_doctor(doctor_id: int, db: Session = Depends(get_db)):
    AdminService(db).delete_doctor(doctor_id)

# Patients
@router.get("/patients", response_model=List[PatientResponse])
async def list_patients(keyword: Optional[str] = None, db: Session = Depends(get_db)):
    return [PatientResponse.model_validate(p) for p in AdminService(db).list_patients(keyword)]

@router.get("/patients/{patient_id}", response_model=PatientResponse)
async def get_patient(patient_id: int, db: Session = Depends(get_db)):
    return PatientResponse.model_validate(AdminService(db).get_patient(patient_id))

# Appointments
@router.get("/appointments", response_model=List[AppointmentResponse])
async def list_appointments(
    appointment_date: Optional[date] = Query(None, alias="date"),
    db: Session = Depends(get_db)
):
    return AppointmentService(db).list_appointments(appointment_date)

@router.get("/appointments/{appointment_id}", response_model=AppointmentResponse)
async def get_appointment(appointment_id: int, db: Session = Depends(get_db)):
    return AppointmentService(db).get_appointment(appointment_id)

@router.put("/appointments/{appointment_id}/complete", response_model=AppointmentResponse)
async def complete_appointment(appointment_id: int, db: Session = Depends(get_db)):
    """Mark a visit as completed."""
    appointment = AppointmentLifecycle(db).complete_appointment(appointment_id)
    return AppointmentService(db).to_response(appointment)
