# app/schemas/doctor.py
from pydantic import BaseModel
from typing import List, Optional

class DoctorSummary(BaseModel):
    id: str
    name: str
    specialty: str
    availability: Optional[str] = None
    phone: Optional[str] = None

class DoctorListResponse(BaseModel):
    success: bool = True
    doctors: List[DoctorSummary]

class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None

class DoctorProfile(BaseModel):
    id: str
    name: str
    email: str
    specialty: str

class LoginResponse(BaseModel):
    success: bool = True
    doctor: DoctorProfile
    token: str
