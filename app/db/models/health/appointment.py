# app/db/models/health/appointment.py
from typing import Optional
from sqlmodel import SQLModel, Field, Relationship
from datetime import datetime, timezone
import uuid

class Appointment(SQLModel, table=True):
    __tablename__ = "appointments"
    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    doctor_id: str = Field(foreign_key="doctors.id", index=True)
    patient_id: str = Field(foreign_key="patients.id")
    written_description: Optional[str] = Field(default=None)
    audio_file_url: Optional[str] = Field(default=None)
    status: str = Field(default="pending", index=True)
    # Aware UTC
    scheduled_time: Optional[datetime] = Field(default=None)
    video_link: Optional[str] = Field(default=None)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), index=True)
    confirmed_at: Optional[datetime] = Field(default=None)

    # Relationships
    doctor: Optional["Doctor"] = Relationship(back_populates="appointments")
    patient: Optional["Patient"] = Relationship(back_populates="appointments")
