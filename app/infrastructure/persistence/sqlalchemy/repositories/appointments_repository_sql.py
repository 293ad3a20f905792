import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import selectinload
from sqlmodel import Session, select

from .....db.models import Appointment, Patient
from .....application.ports.appointments_repo import (
    AppointmentsRepository,
    AppointmentDto,
    PatientDto,
)
from .....exceptions import PersistenceError

logger = logging.getLogger(__name__)


def _utc(value: Optional[datetime]) -> Optional[datetime]:
    # SQLite hands back naive values; they were written as UTC
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


def patient_to_dto(p: Patient) -> PatientDto:
    return PatientDto(id=p.id, name=p.name, email=p.email, phone=p.phone, age=p.age, sex=p.sex)


class SqlAppointmentsRepository(AppointmentsRepository):
    def __init__(self, session: Session):
        self.session = session

    def _appt_to_dto(self, a: Appointment) -> AppointmentDto:
        return AppointmentDto(
            id=a.id,
            doctor_id=a.doctor_id,
            patient_id=a.patient_id,
            written_description=a.written_description,
            audio_file_url=a.audio_file_url,
            status=a.status,
            scheduled_time=_utc(a.scheduled_time),
            video_link=a.video_link,
            created_at=_utc(a.created_at),
            confirmed_at=_utc(a.confirmed_at),
            doctor_name=a.doctor.name if a.doctor else None,
            doctor_specialty=a.doctor.specialty if a.doctor else None,
            patient=patient_to_dto(a.patient) if a.patient else None,
        )

    def _query(self):
        return select(Appointment).options(
            selectinload(Appointment.doctor), selectinload(Appointment.patient)
        )

    def _fail(self, action: str, e: Exception) -> PersistenceError:
        self.session.rollback()
        logger.error(f"Database error while {action}: {e}")
        return PersistenceError(f"Failed to {action}")

    def create(self, doctor_id: str, patient_id: str, written_description: Optional[str], audio_file_url: Optional[str]) -> AppointmentDto:
        appt = Appointment(
            doctor_id=doctor_id,
            patient_id=patient_id,
            written_description=written_description,
            audio_file_url=audio_file_url,
            status="pending",
        )
        try:
            self.session.add(appt)
            self.session.commit()
            self.session.refresh(appt)
            return self._appt_to_dto(appt)
        except SQLAlchemyError as e:
            raise self._fail("create appointment", e)

    def get_by_id(self, appointment_id: str) -> Optional[AppointmentDto]:
        try:
            a = self.session.exec(self._query().where(Appointment.id == appointment_id)).first()
        except SQLAlchemyError as e:
            raise self._fail("fetch appointment", e)
        return self._appt_to_dto(a) if a else None

    def list_for_doctor(self, doctor_id: str, status: Optional[str] = None) -> List[AppointmentDto]:
        query = self._query().where(Appointment.doctor_id == doctor_id)
        if status:
            query = query.where(Appointment.status == status)
        try:
            rows = self.session.exec(query.order_by(Appointment.created_at.desc())).all()
        except SQLAlchemyError as e:
            raise self._fail("fetch appointments", e)
        return [self._appt_to_dto(r) for r in rows]

    def mark_confirmed(self, appointment_id: str, scheduled_time: datetime, video_link: str, confirmed_at: datetime) -> Optional[AppointmentDto]:
        try:
            a = self.session.exec(self._query().where(Appointment.id == appointment_id)).first()
            if not a:
                return None
            # status, time and link go out in a single commit
            a.status = "confirmed"
            a.scheduled_time = scheduled_time
            a.video_link = video_link
            a.confirmed_at = confirmed_at
            self.session.add(a)
            self.session.commit()
            self.session.refresh(a)
            return self._appt_to_dto(a)
        except SQLAlchemyError as e:
            raise self._fail("confirm appointment", e)

    def delete(self, appointment_id: str) -> bool:
        try:
            a = self.session.exec(select(Appointment).where(Appointment.id == appointment_id)).first()
            if not a:
                return False
            self.session.delete(a)
            self.session.commit()
            return True
        except SQLAlchemyError as e:
            raise self._fail("delete appointment", e)
