from dataclasses import dataclass
from typing import List, Optional
from datetime import datetime


@dataclass
class PatientDto:
    id: str
    name: str
    email: str
    phone: str
    age: int
    sex: str


@dataclass
class AppointmentDto:
    id: str
    doctor_id: str
    patient_id: str
    written_description: Optional[str]
    audio_file_url: Optional[str]
    status: str
    scheduled_time: Optional[datetime]
    video_link: Optional[str]
    created_at: datetime
    confirmed_at: Optional[datetime]
    doctor_name: Optional[str] = None
    doctor_specialty: Optional[str] = None
    patient: Optional[PatientDto] = None


class AppointmentsRepository:
    def create(self, doctor_id: str, patient_id: str, written_description: Optional[str], audio_file_url: Optional[str]) -> AppointmentDto:
        ...

    def get_by_id(self, appointment_id: str) -> Optional[AppointmentDto]:
        ...

    def list_for_doctor(self, doctor_id: str, status: Optional[str] = None) -> List[AppointmentDto]:
        ...

    def mark_confirmed(self, appointment_id: str, scheduled_time: datetime, video_link: str, confirmed_at: datetime) -> Optional[AppointmentDto]:
        ...

    def delete(self, appointment_id: str) -> bool:
        ...
