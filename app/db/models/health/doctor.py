# app/db/models/health/doctor.py
from typing import Optional, List
from sqlmodel import SQLModel, Field, Relationship
from datetime import datetime, timezone
import uuid

class Doctor(SQLModel, table=True):
    __tablename__ = "doctors"
    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    name: str = Field(max_length=100, index=True)
    specialty: str = Field(max_length=100)
    availability: Optional[str] = Field(default=None)
    phone: Optional[str] = Field(max_length=20, default=None)
    email: str = Field(max_length=100, unique=True, index=True)
    password_hash: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    # Relationships
    appointments: List["Appointment"] = Relationship(back_populates="doctor")
