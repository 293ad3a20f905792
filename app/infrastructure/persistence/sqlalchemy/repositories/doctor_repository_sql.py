import logging
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from .....db.models import Doctor
from .....application.ports.doctor_repo import DoctorDto, DoctorRepository
from .....exceptions import PersistenceError

logger = logging.getLogger(__name__)


class SqlDoctorRepository(DoctorRepository):
    def __init__(self, session: Session):
        self.session = session

    def _to_dto(self, d: Doctor) -> DoctorDto:
        return DoctorDto(
            id=d.id,
            name=d.name,
            specialty=d.specialty,
            availability=d.availability,
            phone=d.phone,
            email=d.email,
            password_hash=d.password_hash,
        )

    def _exec(self, query, action: str):
        try:
            return self.session.exec(query)
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Database error while {action}: {e}")
            raise PersistenceError(f"Failed to {action}")

    def list_all(self) -> List[DoctorDto]:
        rows = self._exec(select(Doctor).order_by(Doctor.name), "fetch doctors").all()
        return [self._to_dto(d) for d in rows]

    def get_by_id(self, doctor_id: str) -> Optional[DoctorDto]:
        d = self._exec(select(Doctor).where(Doctor.id == doctor_id), "fetch doctor").first()
        return self._to_dto(d) if d else None

    def get_by_email(self, email: str) -> Optional[DoctorDto]:
        d = self._exec(select(Doctor).where(Doctor.email == email), "fetch doctor").first()
        return self._to_dto(d) if d else None

    def has_any(self) -> bool:
        return self._exec(select(Doctor.id).limit(1), "query doctors").first() is not None
