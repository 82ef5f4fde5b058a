from fastapi import APIRouter

from .auth import router as auth_router
from .patient import router as patient_router
from .doctor import router as doctor_router
from .admin import router as admin_router

api_router = APIRouter()
api_router.include_router(auth_router)
api_router.include_router(patient_router)
api_router.include_router(doctor_router)
api_router.include_router(admin_router)
