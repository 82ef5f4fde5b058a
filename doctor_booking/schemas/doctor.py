from pydantic import BaseModel, EmailStr, Field, ConfigDict, field_validator
from datetime import datetime
from typing import Optional

from ..models.doctor import DoctorStatus


class DoctorBase(BaseModel):
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    specialization: str = Field(..., min_length=1, max_length=100)
    qualification: Optional[str] = Field(None, max_length=200)
    years_of_experience: int = Field(0, ge=0)
    bio: Optional[str] = None
    phone_number: Optional[str] = Field(None, max_length=20)
    office_address: Optional[str] = Field(None, max_length=255)


class DoctorCreate(DoctorBase):
    """Admin-side doctor creation; also provisions the doctor's login."""
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=72)
    status: DoctorStatus = DoctorStatus.ACTIVE


class DoctorUpdate(BaseModel):
    """Partial update; omitted fields are left unchanged."""
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    specialization: Optional[str] = Field(None, min_length=1, max_length=100)
    qualification: Optional[str] = Field(None, max_length=200)
    years_of_experience: Optional[int] = Field(None, ge=0)
    bio: Optional[str] = None
    phone_number: Optional[str] = Field(None, max_length=20)
    office_address: Optional[str] = Field(None, max_length=255)
    status: Optional[DoctorStatus] = None

    @field_validator("first_name", "last_name", "specialization", "years_of_experience", "status")
    @classmethod
    def reject_null(cls, value):
        # Backed by NOT NULL columns; omit the field to keep the current value
        if value is None:
            raise ValueError("may be omitted but not null")
        return value


class DoctorResponse(DoctorBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    full_name: str
    email: Optional[EmailStr] = None
    status: DoctorStatus
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
