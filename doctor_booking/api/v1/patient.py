from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List, Optional

from ...core.database import get_db
from ...api.deps import get_current_patient
from ...models.doctor import DoctorStatus
from ...models.patient import Patient
from ...schemas.appointment import AppointmentCreate, AppointmentResponse
from ...schemas.doctor import DoctorResponse
from ...schemas.patient import PatientResponse, PatientUpdate
from ...services.admin_service import AdminService
from ...services.appointment_lifecycle import AppointmentLifecycle
from ...services.appointment_service import AppointmentService
from ...services.slot_allocator import SlotAllocator

router = APIRouter(prefix="/patient", tags=["Patient"])

@router.get("/profile", response_model=PatientResponse)
async def get_profile(patient: Patient = Depends(get_current_patient)):
    return PatientResponse.model_validate(patient)

@router.put("/profile", response_model=PatientResponse)
async def update_profile(
    profile_data: PatientUpdate,
    db: Session = Depends(get_db),
    patient: Patient = Depends(get_current_patient)
):
    """Update the current patient's personal details."""
    updated = AdminService(db).update_patient(patient.id, profile_data)
    return PatientResponse.model_validate(updated)

@router.get("/doctors", response_model=List[DoctorResponse])
async def list_active_doctors(
    keyword: Optional[str] = None,
    db: Session = Depends(get_db),
    patient: Patient = Depends(get_current_patient)
):
    """Doctors currently accepting bookings."""
    doctors = AdminService(db).list_doctors(keyword, doctor_status=DoctorStatus.ACTIVE)
    return [DoctorResponse.model_validate(d) for d in doctors]

@router.get("/doctors/{doctor_id}", response_model=DoctorResponse)
async def get_active_doctor(
    doctor_id: int,
    db: Session = Depends(get_db),
    patient: Patient = Depends(get_current_patient)
):
    return DoctorResponse.model_validate(AdminService(db).get_active_doctor(doctor_id))

@router.post("/appointments", response_model=AppointmentResponse, status_code=status.HTTP_201_CREATED)
async def book_appointment(
    request: AppointmentCreate,
    db: Session = Depends(get_db),
    patient: Patient = Depends(get_current_patient)
):
    """Book a slot with a doctor for the current patient."""
    appointment = SlotAllocator(db).book_appointment(
        patient.id,
        request.doctor_id,
        request.appointment_date,
        request.appointment_time,
        request.notes
    )
    return AppointmentService(db).to_response(appointment)

@router.get("/appointments", response_model=List[AppointmentResponse])
async def list_my_appointments(
    db: Session = Depends(get_db),
    patient: Patient = Depends(get_current_patient)
):
    return AppointmentService(db).list_patient_appointments(patient.id)

@router.get("/appointments/{appointment_id}", response_model=AppointmentResponse)
async def get_my_appointment(
    appointment_id: int,
    db: Session = Depends(get_db),
    patient: Patient = Depends(get_current_patient)
):
    return AppointmentService(db).get_patient_appointment(appointment_id, patient.id)

@router.put("/appointments/{appointment_id}/cancel", response_model=AppointmentResponse)
@router.delete("/appointments/{appointment_id}", response_model=AppointmentResponse)
async def cancel_appointment(
    appointment_id: int,
    db: Session = Depends(get_db),
    patient: Patient = Depends(get_current_patient)
):
    """Cancel one of the current patient's appointments."""
    appointment = AppointmentLifecycle(db).cancel_appointment(appointment_id, patient.id)
    return AppointmentService(db).to_response(appointment)
