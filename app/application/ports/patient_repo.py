from typing import Protocol

from .appointments_repo import PatientDto


class PatientRepository(Protocol):
    def create(self, name: str, email: str, phone: str, age: int, sex: str) -> PatientDto:
        ...
