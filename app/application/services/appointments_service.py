"""Appointment lifecycle: submission, confirmation and rejection.

An appointment is created ``pending`` and moves to ``confirmed`` only when
a doctor supplies a time; rejection deletes the pending row. Audio upload,
video provisioning and email are soft steps: a failure there is recorded
in the outcome's ``degraded`` set and the operation carries on.

Repositories and storage are synchronous; their calls run in worker
threads so concurrent requests do not wait on each other.
"""
import asyncio
import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, List, Mapping, Optional, Set, Union

from ..ports.appointments_repo import AppointmentDto, AppointmentsRepository
from ..ports.doctor_repo import DoctorRepository
from ..ports.patient_repo import PatientRepository
from ..ports.storage_repo import StorageRepository
from ..ports.video_provider import VideoProvider
from .notification_service import NotificationService
from .scheduling import parse_scheduled_time
from .validation import normalize_description, parse_patient_data, require_symptoms, validate_patient
from ...exceptions import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

STATUS_PENDING = "pending"
STATUS_CONFIRMED = "confirmed"
VALID_STATUSES = (STATUS_PENDING, STATUS_CONFIRMED)

# Names used in Outcome.degraded
AUDIO_UPLOAD = "audio_upload"
VIDEO_PROVIDER = "video_provider"
EMAIL = "email"


@dataclass
class SubmissionOutcome:
    appointment_id: str
    audio_url: Optional[str] = None
    degraded: Set[str] = field(default_factory=set)

    @property
    def email_sent(self) -> bool:
        return EMAIL not in self.degraded


@dataclass
class ConfirmationOutcome:
    appointment: AppointmentDto
    degraded: Set[str] = field(default_factory=set)

    @property
    def email_sent(self) -> bool:
        return EMAIL not in self.degraded


@dataclass
class RejectionOutcome:
    appointment_id: str
    notified: bool = False


@dataclass
class AppointmentsService:
    repo: AppointmentsRepository
    patient_repo: PatientRepository
    doctor_repo: DoctorRepository
    storage: StorageRepository
    notifications: NotificationService
    video_provider: VideoProvider
    fallback_video: VideoProvider
    audio_bucket: str = "audio-recordings"
    audio_content_type: str = "audio/wav"
    schedule_timezone: str = "UTC"
    notify_on_rejection: bool = False

    async def submit_appointment(
        self,
        doctor_id: Optional[str],
        patient_data: Union[str, Mapping[str, Any], None],
        written_description: Optional[str] = None,
        audio: Optional[bytes] = None,
    ) -> SubmissionOutcome:
        # 1. validate everything before any write
        if not doctor_id:
            raise ValidationError("Doctor ID is required")
        patient = validate_patient(parse_patient_data(patient_data))
        description = normalize_description(written_description)
        require_symptoms(description, audio)
        doctor = await asyncio.to_thread(self.doctor_repo.get_by_id, doctor_id)
        if not doctor:
            raise NotFoundError("Doctor not found")

        # 2. patient row
        patient_row = await asyncio.to_thread(
            self.patient_repo.create,
            name=patient.name,
            email=patient.email,
            phone=patient.phone,
            age=patient.age,
            sex=patient.sex,
        )
        logger.info(f"Patient {patient_row.id} created for doctor {doctor_id}")

        degraded: Set[str] = set()

        # 3. audio upload (soft)
        audio_url = None
        if audio:
            try:
                audio_url = await asyncio.to_thread(
                    self.storage.save_bytes,
                    self.audio_bucket,
                    f"{uuid.uuid4()}.wav",
                    audio,
                    self.audio_content_type,
                )
                logger.info(f"Audio recording stored at {audio_url}")
            except Exception as e:
                degraded.add(AUDIO_UPLOAD)
                logger.error(f"Audio upload failed for patient {patient_row.id}, continuing without audio: {e}")

        # 4. appointment row; a failure here leaves the patient row behind
        appointment = await asyncio.to_thread(
            self.repo.create,
            doctor_id=doctor_id,
            patient_id=patient_row.id,
            written_description=description,
            audio_file_url=audio_url,
        )
        logger.info(f"Appointment {appointment.id} created with status {appointment.status}")

        # 5. request-received email (soft)
        try:
            await self.notifications.send_request_received(patient.email, patient.name, appointment.id)
        except Exception as e:
            degraded.add(EMAIL)
            logger.warning(f"Request-received email failed for appointment {appointment.id}: {e}")

        return SubmissionOutcome(appointment_id=appointment.id, audio_url=audio_url, degraded=degraded)

    async def confirm_appointment(self, appointment_id: str, scheduled_time: Optional[str]) -> ConfirmationOutcome:
        scheduled = parse_scheduled_time(scheduled_time, self.schedule_timezone)

        appointment = await self._get(appointment_id)
        doctor_name = appointment.doctor_name or "your doctor"
        patient_name = appointment.patient.name if appointment.patient else "Patient"

        degraded: Set[str] = set()
        join_link = await self._provision_video(appointment.id, doctor_name, patient_name, degraded)

        confirmed = await asyncio.to_thread(
            self.repo.mark_confirmed,
            appointment.id,
            scheduled_time=scheduled,
            video_link=join_link,
            confirmed_at=datetime.now(timezone.utc),
        )
        if not confirmed:
            raise NotFoundError("Appointment not found")
        logger.info(f"Appointment {confirmed.id} confirmed for {scheduled.isoformat()}")

        if not await self._send_confirmation(confirmed):
            degraded.add(EMAIL)
        return ConfirmationOutcome(appointment=confirmed, degraded=degraded)

    async def reject_appointment(self, appointment_id: str) -> RejectionOutcome:
        appointment = await self._get(appointment_id)
        if appointment.status != STATUS_PENDING:
            raise ValidationError("Only pending appointments can be rejected")
        if not await asyncio.to_thread(self.repo.delete, appointment.id):
            raise NotFoundError("Appointment not found")
        logger.info(f"Appointment {appointment.id} rejected and removed")

        notified = False
        if self.notify_on_rejection and appointment.patient:
            try:
                await self.notifications.send_request_declined(
                    appointment.patient.email,
                    appointment.patient.name,
                    appointment.doctor_name or "Your doctor",
                )
                notified = True
            except Exception as e:
                logger.warning(f"Rejection email failed for appointment {appointment.id}: {e}")
        return RejectionOutcome(appointment_id=appointment.id, notified=notified)

    async def resend_confirmation_email(self, appointment_id: str) -> bool:
        appointment = await self._get(appointment_id)
        if appointment.status != STATUS_CONFIRMED:
            raise ValidationError("Appointment is not confirmed")
        return await self._send_confirmation(appointment)

    def list_appointments(self, doctor_id: str, status: Optional[str] = None) -> List[AppointmentDto]:
        if status and status not in VALID_STATUSES:
            raise ValidationError(f"Invalid status. Must be one of: {list(VALID_STATUSES)}")
        return self.repo.list_for_doctor(doctor_id, status or None)

    async def _get(self, appointment_id: str) -> AppointmentDto:
        appointment = await asyncio.to_thread(self.repo.get_by_id, appointment_id)
        if not appointment:
            raise NotFoundError("Appointment not found")
        return appointment

    async def _provision_video(self, appointment_id: str, doctor_name: str, patient_name: str, degraded: Set[str]) -> str:
        try:
            return await self.video_provider.create_session(appointment_id, doctor_name, patient_name)
        except Exception as e:
            degraded.add(VIDEO_PROVIDER)
            logger.error(f"Video provisioning failed for appointment {appointment_id}, using fallback link: {e}")
        return await self.fallback_video.create_session(appointment_id, doctor_name, patient_name)

    async def _send_confirmation(self, appointment: AppointmentDto) -> bool:
        if not appointment.patient:
            logger.warning(f"Appointment {appointment.id} has no patient contact; confirmation email skipped")
            return False
        try:
            await self.notifications.send_appointment_confirmed(
                appointment.patient.email,
                appointment.patient.name,
                appointment.doctor_name or "your doctor",
                appointment.scheduled_time,
                appointment.video_link,
            )
            return True
        except Exception as e:
            logger.error(f"Confirmation email failed for appointment {appointment.id}: {e}")
            return False
