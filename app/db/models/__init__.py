# Models package (re-export feature modules for stable imports)
from .health.doctor import Doctor
from .health.patient import Patient
from .health.appointment import Appointment

__all__ = [
    "Doctor",
    "Patient",
    "Appointment",
]
