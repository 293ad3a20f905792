# app/schemas/appointment.py
from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime

from ...application.ports.appointments_repo import AppointmentDto
from ...application.services.scheduling import canonical_time

class PatientInfo(BaseModel):
    id: str
    name: str
    email: str
    phone: str
    age: int
    sex: str

class DoctorInfo(BaseModel):
    id: str
    name: Optional[str] = None
    specialty: Optional[str] = None

class AppointmentResponse(BaseModel):
    id: str
    doctor_id: str
    patient_id: str
    written_description: Optional[str] = None
    audio_file_url: Optional[str] = None
    status: str
    scheduled_time: Optional[str] = None  # canonical UTC
    video_link: Optional[str] = None
    created_at: datetime
    confirmed_at: Optional[datetime] = None
    patients: Optional[PatientInfo] = None
    doctors: Optional[DoctorInfo] = None

    @classmethod
    def from_dto(cls, a: AppointmentDto) -> "AppointmentResponse":
        return cls(
            id=a.id,
            doctor_id=a.doctor_id,
            patient_id=a.patient_id,
            written_description=a.written_description,
            audio_file_url=a.audio_file_url,
            status=a.status,
            scheduled_time=canonical_time(a.scheduled_time),
            video_link=a.video_link,
            created_at=a.created_at,
            confirmed_at=a.confirmed_at,
            patients=PatientInfo(**vars(a.patient)) if a.patient else None,
            doctors=DoctorInfo(id=a.doctor_id, name=a.doctor_name, specialty=a.doctor_specialty),
        )

class AppointmentListResponse(BaseModel):
    success: bool = True
    appointments: List[AppointmentResponse]

class AppointmentCreatedResponse(BaseModel):
    success: bool = True
    appointmentId: str

class ConfirmRequest(BaseModel):
    scheduledTime: Optional[str] = None

class ConfirmResponse(BaseModel):
    success: bool = True
    appointment: AppointmentResponse
    emailSent: bool

class RejectResponse(BaseModel):
    success: bool = True
    notified: bool

class ResendResponse(BaseModel):
    success: bool = True
    emailSent: bool
