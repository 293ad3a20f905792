from dataclasses import dataclass
from typing import List, Optional, Protocol


@dataclass
class DoctorDto:
    id: str
    name: str
    specialty: str
    availability: Optional[str]
    phone: Optional[str]
    email: str
    password_hash: str


class DoctorRepository(Protocol):
    def list_all(self) -> List[DoctorDto]:
        ...

    def get_by_id(self, doctor_id: str) -> Optional[DoctorDto]:
        ...

    def get_by_email(self, email: str) -> Optional[DoctorDto]:
        ...

    def has_any(self) -> bool:
        ...
