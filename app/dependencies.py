import logging
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlmodel import Session

from .application.services.appointments_service import AppointmentsService
from .application.services.doctors_service import DoctorsService
from .application.services.notification_service import NotificationService
from .config import settings
from .database import get_session
from .exceptions import AuthError
from .infrastructure.email.smtp_mailer import SmtpMailer
from .infrastructure.persistence.sqlalchemy.repositories.appointments_repository_sql import SqlAppointmentsRepository
from .infrastructure.persistence.sqlalchemy.repositories.doctor_repository_sql import SqlDoctorRepository
from .infrastructure.persistence.sqlalchemy.repositories.patient_repository_sql import SqlPatientRepository
from .infrastructure.storage.local_storage import LocalStorageRepository
from .infrastructure.video import build_stream_provider, build_video_providers
from .utils import decode_jwt_token

logger = logging.getLogger(__name__)

oauth2_scheme = HTTPBearer(auto_error=False)


def get_current_doctor(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(oauth2_scheme),
) -> str:
    token = credentials.credentials if credentials and credentials.credentials else None
    if not token:
        raise AuthError("Authentication required")
    payload = decode_jwt_token(token)
    if not payload:
        raise AuthError("Invalid or expired token")
    doctor_id = payload.get("sub")
    if not doctor_id:
        raise AuthError("Invalid token: missing doctor ID")
    request.state.doctor_id = doctor_id
    return doctor_id


def get_notification_service() -> NotificationService:
    return NotificationService(
        mailer=SmtpMailer(),
        brand=settings.EMAIL_BRAND,
        timezone=settings.SCHEDULE_TIMEZONE,
    )


def get_doctors_service(session: Session = Depends(get_session)) -> DoctorsService:
    return DoctorsService(repo=SqlDoctorRepository(session))


def get_appointments_service(
    session: Session = Depends(get_session),
    notifications: NotificationService = Depends(get_notification_service),
) -> AppointmentsService:
    primary, fallback = build_video_providers(settings)
    return AppointmentsService(
        repo=SqlAppointmentsRepository(session),
        patient_repo=SqlPatientRepository(session),
        doctor_repo=SqlDoctorRepository(session),
        storage=LocalStorageRepository(),
        notifications=notifications,
        video_provider=primary,
        fallback_video=fallback,
        audio_bucket=settings.AUDIO_BUCKET,
        audio_content_type=settings.AUDIO_CONTENT_TYPE,
        schedule_timezone=settings.SCHEDULE_TIMEZONE,
        notify_on_rejection=settings.NOTIFY_ON_REJECTION,
    )


def get_video_token_issuer():
    return build_stream_provider(settings)
