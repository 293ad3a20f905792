# app/db/models/health/patient.py
from typing import List
from sqlmodel import SQLModel, Field, Relationship
from datetime import datetime, timezone
import uuid

class Patient(SQLModel, table=True):
    __tablename__ = "patients"
    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    name: str = Field(max_length=100)
    email: str = Field(max_length=100)
    phone: str = Field(max_length=20)
    age: int
    sex: str = Field(max_length=20)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    # Relationships
    appointments: List["Appointment"] = Relationship(back_populates="patient")
