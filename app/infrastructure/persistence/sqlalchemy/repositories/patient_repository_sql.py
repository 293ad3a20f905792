import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from .....db.models import Patient
from .....application.ports.appointments_repo import PatientDto
from .....application.ports.patient_repo import PatientRepository
from .....exceptions import PersistenceError
from .appointments_repository_sql import patient_to_dto

logger = logging.getLogger(__name__)


class SqlPatientRepository(PatientRepository):
    def __init__(self, session: Session):
        self.session = session

    def create(self, name: str, email: str, phone: str, age: int, sex: str) -> PatientDto:
        patient = Patient(name=name, email=email, phone=phone, age=age, sex=sex)
        try:
            self.session.add(patient)
            self.session.commit()
            self.session.refresh(patient)
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Database error inserting patient: {e}")
            raise PersistenceError("Failed to create appointment")
        return patient_to_dto(patient)
