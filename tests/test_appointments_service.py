import asyncio
import json
import threading
from dataclasses import replace
from datetime import datetime, timezone

import pytest

from app.application.ports.appointments_repo import AppointmentDto, PatientDto
from app.application.ports.doctor_repo import DoctorDto
from app.application.services.appointments_service import (
    AUDIO_UPLOAD,
    EMAIL,
    VIDEO_PROVIDER,
    AppointmentsService,
)
from app.application.services.notification_service import NotificationService
from app.exceptions import NotFoundError, PersistenceError, ValidationError

FALLBACK_LINK = "https://meet.example.com/fallback"


class FakeDoctorRepo:
    def __init__(self):
        self.doctors = {
            "doc-1": DoctorDto("doc-1", "Dr. Alice Uwase", "Cardiologist", "Mon-Fri", "0788000001", "alice@example.com", "x"),
        }

    def get_by_id(self, doctor_id):
        return self.doctors.get(doctor_id)


class FakePatientRepo:
    def __init__(self, fail=False):
        self.rows = []
        self.fail = fail

    def create(self, name, email, phone, age, sex):
        if self.fail:
            raise PersistenceError("Failed to create appointment")
        p = PatientDto(f"pat-{len(self.rows) + 1}", name, email, phone, age, sex)
        self.rows.append(p)
        return p


class FakeApptRepo:
    def __init__(self, patients, doctors, fail_create=False):
        self.rows = {}
        self.patients = patients
        self.doctors = doctors
        self.fail_create = fail_create

    def _hydrate(self, a):
        doctor = self.doctors.get_by_id(a.doctor_id)
        patient = next((p for p in self.patients.rows if p.id == a.patient_id), None)
        return replace(a, doctor_name=doctor.name if doctor else None, patient=patient)

    def create(self, doctor_id, patient_id, written_description, audio_file_url):
        if self.fail_create:
            raise PersistenceError("Failed to create appointment")
        a = AppointmentDto(
            id=f"appt-{len(self.rows) + 1}",
            doctor_id=doctor_id,
            patient_id=patient_id,
            written_description=written_description,
            audio_file_url=audio_file_url,
            status="pending",
            scheduled_time=None,
            video_link=None,
            created_at=datetime.now(timezone.utc),
            confirmed_at=None,
        )
        self.rows[a.id] = a
        return self._hydrate(a)

    def get_by_id(self, appointment_id):
        a = self.rows.get(appointment_id)
        return self._hydrate(a) if a else None

    def list_for_doctor(self, doctor_id, status=None):
        rows = [a for a in self.rows.values() if a.doctor_id == doctor_id and (not status or a.status == status)]
        return [self._hydrate(a) for a in sorted(rows, key=lambda a: a.created_at, reverse=True)]

    def mark_confirmed(self, appointment_id, scheduled_time, video_link, confirmed_at):
        a = self.rows.get(appointment_id)
        if not a:
            return None
        a = replace(a, status="confirmed", scheduled_time=scheduled_time, video_link=video_link, confirmed_at=confirmed_at)
        self.rows[appointment_id] = a
        return self._hydrate(a)

    def delete(self, appointment_id):
        return self.rows.pop(appointment_id, None) is not None


class FakeStorage:
    def __init__(self, fail=False):
        self.saved = []
        self.fail = fail

    def save_bytes(self, bucket, filename, data, content_type):
        if self.fail:
            raise ConnectionError("storage unreachable")
        self.saved.append((bucket, filename, data, content_type))
        return f"http://files.local/{bucket}/{filename}"


class FakeMailer:
    def __init__(self, fail=False):
        self.sent = []
        self.fail = fail

    async def send(self, to, subject, html):
        if self.fail:
            raise ConnectionError("smtp down")
        self.sent.append((to, subject, html))


class FakeVideo:
    def __init__(self, link=None, fail=False):
        self.link = link
        self.fail = fail
        self.calls = []

    async def create_session(self, appointment_id, doctor_name, patient_name):
        self.calls.append((appointment_id, doctor_name, patient_name))
        if self.fail:
            raise RuntimeError("provider down")
        return self.link or f"https://video.local/video-call/appointment-{appointment_id}"


PATIENT = {"name": "Jean", "email": "jean@example.com", "phone": "0788123456", "age": 34, "sex": "male"}


def build(storage=None, mailer=None, video=None, patients=None, fail_create=False, notify_on_rejection=False):
    doctors = FakeDoctorRepo()
    patients = patients or FakePatientRepo()
    repo = FakeApptRepo(patients, doctors, fail_create=fail_create)
    mailer = mailer or FakeMailer()
    svc = AppointmentsService(
        repo=repo,
        patient_repo=patients,
        doctor_repo=doctors,
        storage=storage or FakeStorage(),
        notifications=NotificationService(mailer=mailer),
        video_provider=video or FakeVideo(),
        fallback_video=FakeVideo(link=FALLBACK_LINK),
        notify_on_rejection=notify_on_rejection,
    )
    return svc, repo, patients, mailer


def submit(svc, **kwargs):
    params = {"doctor_id": "doc-1", "patient_data": json.dumps(PATIENT), "written_description": "chest pain", "audio": None}
    params.update(kwargs)
    return asyncio.run(svc.submit_appointment(**params))


def test_submit_creates_one_pending_appointment_and_one_patient():
    svc, repo, patients, mailer = build()
    out = submit(svc)
    assert len(patients.rows) == 1
    assert list(repo.rows) == [out.appointment_id]
    appt = repo.rows[out.appointment_id]
    assert appt.status == "pending"
    assert appt.patient_id == patients.rows[0].id
    assert appt.scheduled_time is None and appt.video_link is None
    assert out.degraded == set()
    assert mailer.sent[0][0] == "jean@example.com"
    assert out.appointment_id in mailer.sent[0][2]


def test_submit_without_description_or_audio_writes_nothing():
    svc, repo, patients, mailer = build()
    with pytest.raises(ValidationError):
        submit(svc, written_description="   ", audio=None)
    with pytest.raises(ValidationError):
        submit(svc, written_description=None, audio=b"")
    assert patients.rows == []
    assert repo.rows == {}
    assert mailer.sent == []


def test_submit_requires_doctor_id():
    svc, repo, patients, _ = build()
    with pytest.raises(ValidationError, match="Doctor ID is required"):
        submit(svc, doctor_id="")
    assert patients.rows == []


def test_submit_unknown_doctor_is_not_found_before_writes():
    svc, repo, patients, _ = build()
    with pytest.raises(NotFoundError):
        submit(svc, doctor_id="nope")
    assert patients.rows == []


def test_submit_invalid_patient_is_rejected_before_writes():
    svc, repo, patients, _ = build()
    bad = dict(PATIENT, age=151)
    with pytest.raises(ValidationError):
        submit(svc, patient_data=json.dumps(bad))
    assert patients.rows == [] and repo.rows == {}


def test_submit_audio_only_stores_recording():
    storage = FakeStorage()
    svc, repo, _, _ = build(storage=storage)
    out = submit(svc, written_description="", audio=b"RIFF....WAVE")
    bucket, filename, data, content_type = storage.saved[0]
    assert bucket == "audio-recordings"
    assert filename.endswith(".wav")
    assert content_type == "audio/wav"
    assert repo.rows[out.appointment_id].audio_file_url == out.audio_url
    assert repo.rows[out.appointment_id].written_description is None


def test_submit_succeeds_with_null_audio_when_storage_unreachable():
    svc, repo, _, _ = build(storage=FakeStorage(fail=True))
    out = submit(svc, written_description="", audio=b"RIFF")
    assert AUDIO_UPLOAD in out.degraded
    assert out.audio_url is None
    assert repo.rows[out.appointment_id].audio_file_url is None
    assert repo.rows[out.appointment_id].status == "pending"


def test_submit_email_failure_is_soft():
    svc, repo, _, _ = build(mailer=FakeMailer(fail=True))
    out = submit(svc)
    assert out.appointment_id in repo.rows
    assert out.email_sent is False
    assert EMAIL in out.degraded


def test_submit_patient_store_failure_creates_no_appointment():
    svc, repo, _, _ = build(patients=FakePatientRepo(fail=True))
    with pytest.raises(PersistenceError):
        submit(svc)
    assert repo.rows == {}


def test_submit_appointment_store_failure_leaves_patient_row():
    svc, repo, patients, mailer = build(fail_create=True)
    with pytest.raises(PersistenceError):
        submit(svc)
    assert len(patients.rows) == 1
    assert mailer.sent == []


def test_confirm_sets_time_link_and_status_together():
    svc, repo, _, mailer = build()
    appt_id = submit(svc).appointment_id
    out = asyncio.run(svc.confirm_appointment(appt_id, "2024-12-25 14:30"))
    assert out.appointment.status == "confirmed"
    assert out.appointment.scheduled_time == datetime(2024, 12, 25, 14, 30, tzinfo=timezone.utc)
    assert out.appointment.video_link.endswith(f"appointment-{appt_id}")
    assert out.appointment.confirmed_at is not None
    assert out.email_sent is True
    assert "Appointment Confirmed" in mailer.sent[-1][1]


def test_confirm_human_and_iso_inputs_store_same_instant():
    svc, repo, _, _ = build()
    first = submit(svc).appointment_id
    second = submit(svc).appointment_id
    a = asyncio.run(svc.confirm_appointment(first, "2024-12-25 14:30"))
    b = asyncio.run(svc.confirm_appointment(second, "2024-12-25T14:30:00.000Z"))
    assert a.appointment.scheduled_time == b.appointment.scheduled_time


def test_confirm_twice_keeps_status_and_time():
    svc, repo, _, _ = build()
    appt_id = submit(svc).appointment_id
    one = asyncio.run(svc.confirm_appointment(appt_id, "2024-12-25 14:30"))
    two = asyncio.run(svc.confirm_appointment(appt_id, "2024-12-25 14:30"))
    assert one.appointment.status == two.appointment.status == "confirmed"
    assert one.appointment.scheduled_time == two.appointment.scheduled_time


def test_confirm_rejects_missing_or_bad_time_without_changes():
    svc, repo, _, _ = build()
    appt_id = submit(svc).appointment_id
    with pytest.raises(ValidationError):
        asyncio.run(svc.confirm_appointment(appt_id, None))
    with pytest.raises(ValidationError):
        asyncio.run(svc.confirm_appointment(appt_id, "next tuesday"))
    assert repo.rows[appt_id].status == "pending"


def test_confirm_unknown_appointment():
    svc, _, _, _ = build()
    with pytest.raises(NotFoundError):
        asyncio.run(svc.confirm_appointment("missing", "2024-12-25 14:30"))


def test_confirm_falls_back_to_static_link_when_provider_fails():
    svc, repo, _, _ = build(video=FakeVideo(fail=True))
    appt_id = submit(svc).appointment_id
    out = asyncio.run(svc.confirm_appointment(appt_id, "2024-12-25 14:30"))
    assert out.appointment.video_link == FALLBACK_LINK
    assert VIDEO_PROVIDER in out.degraded
    assert out.appointment.status == "confirmed"


def test_confirm_email_failure_keeps_confirmation():
    mailer = FakeMailer()
    svc, repo, _, _ = build(mailer=mailer)
    appt_id = submit(svc).appointment_id
    mailer.fail = True
    out = asyncio.run(svc.confirm_appointment(appt_id, "2024-12-25 14:30"))
    assert out.email_sent is False
    assert repo.get_by_id(appt_id).status == "confirmed"


def test_confirm_passes_names_to_video_provider():
    video = FakeVideo()
    svc, _, _, _ = build(video=video)
    appt_id = submit(svc).appointment_id
    asyncio.run(svc.confirm_appointment(appt_id, "2024-12-25 14:30"))
    assert video.calls == [(appt_id, "Dr. Alice Uwase", "Jean")]


def test_reject_removes_pending_appointment_silently_by_default():
    svc, repo, _, mailer = build()
    appt_id = submit(svc).appointment_id
    sent_before = len(mailer.sent)
    out = asyncio.run(svc.reject_appointment(appt_id))
    assert out.notified is False
    assert appt_id not in repo.rows
    assert len(mailer.sent) == sent_before


def test_reject_can_notify_patient():
    svc, repo, _, mailer = build(notify_on_rejection=True)
    appt_id = submit(svc).appointment_id
    out = asyncio.run(svc.reject_appointment(appt_id))
    assert out.notified is True
    assert "Appointment Request Update" in mailer.sent[-1][1]


def test_reject_confirmed_appointment_is_invalid():
    svc, repo, _, _ = build()
    appt_id = submit(svc).appointment_id
    asyncio.run(svc.confirm_appointment(appt_id, "2024-12-25 14:30"))
    with pytest.raises(ValidationError):
        asyncio.run(svc.reject_appointment(appt_id))
    assert appt_id in repo.rows


def test_resend_confirmation_only_retries_email():
    mailer = FakeMailer(fail=True)
    video = FakeVideo()
    svc, repo, _, _ = build(mailer=mailer, video=video)
    appt_id = submit(svc).appointment_id
    out = asyncio.run(svc.confirm_appointment(appt_id, "2024-12-25 14:30"))
    assert out.email_sent is False
    mailer.fail = False
    assert asyncio.run(svc.resend_confirmation_email(appt_id)) is True
    assert len(video.calls) == 1


def test_resend_confirmation_requires_confirmed():
    svc, _, _, _ = build()
    appt_id = submit(svc).appointment_id
    with pytest.raises(ValidationError):
        asyncio.run(svc.resend_confirmation_email(appt_id))


def test_list_appointments_filters_by_status():
    svc, _, _, _ = build()
    first = submit(svc).appointment_id
    submit(svc)
    asyncio.run(svc.confirm_appointment(first, "2024-12-25 14:30"))
    assert [a.id for a in svc.list_appointments("doc-1", "confirmed")] == [first]
    assert len(svc.list_appointments("doc-1")) == 2
    with pytest.raises(ValidationError):
        svc.list_appointments("doc-1", "archived")


class BarrierStorage(FakeStorage):
    """Blocks until two uploads are in flight at the same time."""

    def __init__(self):
        super().__init__()
        self.barrier = threading.Barrier(2, timeout=2)

    def save_bytes(self, bucket, filename, data, content_type):
        self.barrier.wait()
        return super().save_bytes(bucket, filename, data, content_type)


def test_concurrent_submissions_upload_in_parallel():
    storage = BarrierStorage()
    svc, _, _, _ = build(storage=storage)

    async def both():
        params = {"patient_data": json.dumps(PATIENT), "written_description": "", "audio": b"RIFF"}
        return await asyncio.gather(
            svc.submit_appointment("doc-1", **params),
            svc.submit_appointment("doc-1", **params),
        )

    outcomes = asyncio.run(both())
    assert [o.degraded for o in outcomes] == [set(), set()]
    assert len(storage.saved) == 2


def test_confirmed_at_is_aware_utc():
    svc, _, _, _ = build()
    appt_id = submit(svc).appointment_id
    out = asyncio.run(svc.confirm_appointment(appt_id, "2024-12-25 14:30"))
    assert out.appointment.confirmed_at.tzinfo is not None
    assert out.appointment.confirmed_at.utcoffset().total_seconds() == 0
