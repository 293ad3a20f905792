import logging

from fastapi import APIRouter, Depends

from ..application.services.doctors_service import DoctorsService
from ..dependencies import get_doctors_service
from ..schemas.doctors.doctor import (
    DoctorListResponse,
    DoctorProfile,
    DoctorSummary,
    LoginRequest,
    LoginResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Doctors"])


@router.get("/doctors", response_model=DoctorListResponse)
def get_doctors(doctors_service: DoctorsService = Depends(get_doctors_service)):
    doctors = doctors_service.list_doctors()
    return DoctorListResponse(
        doctors=[
            DoctorSummary(
                id=d.id,
                name=d.name,
                specialty=d.specialty,
                availability=d.availability,
                phone=d.phone,
            )
            for d in doctors
        ]
    )


@router.post("/doctor/login", response_model=LoginResponse)
def doctor_login(
    credentials: LoginRequest,
    doctors_service: DoctorsService = Depends(get_doctors_service),
):
    logger.info("Doctor login attempt")
    result = doctors_service.authenticate(credentials.email or "", credentials.password or "")
    d = result.doctor
    return LoginResponse(
        doctor=DoctorProfile(id=d.id, name=d.name, email=d.email, specialty=d.specialty),
        token=result.token,
    )
