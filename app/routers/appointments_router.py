import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile

from ..application.services.appointments_service import AppointmentsService
from ..dependencies import get_appointments_service, get_current_doctor
from ..schemas.appointments.appointment import (
    AppointmentCreatedResponse,
    AppointmentListResponse,
    AppointmentResponse,
    ConfirmRequest,
    ConfirmResponse,
    RejectResponse,
    ResendResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Appointments"])


@router.post("/appointments", response_model=AppointmentCreatedResponse)
async def create_appointment(
    doctorId: Optional[str] = Form(None),
    patientData: Optional[str] = Form(None),
    writtenDescription: Optional[str] = Form(None),
    audioFile: Optional[UploadFile] = File(None),
    appt_service: AppointmentsService = Depends(get_appointments_service),
):
    audio = await audioFile.read() if audioFile is not None else None
    logger.info(
        f"Appointment request received: doctor={doctorId} "
        f"description_length={len(writtenDescription or '')} audio={'yes' if audio else 'no'}"
    )
    outcome = await appt_service.submit_appointment(doctorId, patientData, writtenDescription, audio)
    if outcome.degraded:
        logger.warning(f"Appointment {outcome.appointment_id} created with degraded steps: {sorted(outcome.degraded)}")
    return AppointmentCreatedResponse(appointmentId=outcome.appointment_id)


@router.get("/doctor/{doctor_id}/appointments", response_model=AppointmentListResponse)
def get_doctor_appointments(
    doctor_id: str,
    status: Optional[str] = Query(None),
    current_doctor: str = Depends(get_current_doctor),
    appt_service: AppointmentsService = Depends(get_appointments_service),
):
    appointments = appt_service.list_appointments(doctor_id, status)
    return AppointmentListResponse(appointments=[AppointmentResponse.from_dto(a) for a in appointments])


@router.put("/appointments/{appointment_id}/confirm", response_model=ConfirmResponse)
async def confirm_appointment(
    appointment_id: str,
    body: ConfirmRequest,
    current_doctor: str = Depends(get_current_doctor),
    appt_service: AppointmentsService = Depends(get_appointments_service),
):
    outcome = await appt_service.confirm_appointment(appointment_id, body.scheduledTime)
    return ConfirmResponse(
        appointment=AppointmentResponse.from_dto(outcome.appointment),
        emailSent=outcome.email_sent,
    )


@router.delete("/appointments/{appointment_id}", response_model=RejectResponse)
async def reject_appointment(
    appointment_id: str,
    current_doctor: str = Depends(get_current_doctor),
    appt_service: AppointmentsService = Depends(get_appointments_service),
):
    outcome = await appt_service.reject_appointment(appointment_id)
    return RejectResponse(notified=outcome.notified)


@router.post("/appointments/{appointment_id}/resend-confirmation", response_model=ResendResponse)
async def resend_confirmation(
    appointment_id: str,
    current_doctor: str = Depends(get_current_doctor),
    appt_service: AppointmentsService = Depends(get_appointments_service),
):
    sent = await appt_service.resend_confirmation_email(appointment_id)
    return ResendResponse(emailSent=sent)
