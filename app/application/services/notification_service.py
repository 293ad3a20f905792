from dataclasses import dataclass
from datetime import datetime

from ..ports.mailer import Mailer
from .scheduling import display_time
from ...email_templates import (
    appointment_confirmed_template,
    request_declined_template,
    request_received_template,
)


@dataclass
class NotificationService:
    mailer: Mailer
    brand: str = "Rwanda Medical Connect"
    timezone: str = "UTC"

    async def send_request_received(self, email: str, patient_name: str, appointment_id: str) -> None:
        await self.mailer.send(
            to=email,
            subject=f"Appointment Request Received - {self.brand}",
            html=request_received_template(patient_name, appointment_id, self.brand),
        )

    async def send_appointment_confirmed(self, email: str, patient_name: str, doctor_name: str, scheduled_time: datetime, join_link: str) -> None:
        await self.mailer.send(
            to=email,
            subject=f"Appointment Confirmed - {self.brand}",
            html=appointment_confirmed_template(
                patient_name,
                doctor_name,
                display_time(scheduled_time, self.timezone),
                join_link,
            ),
        )

    async def send_request_declined(self, email: str, patient_name: str, doctor_name: str) -> None:
        await self.mailer.send(
            to=email,
            subject=f"Appointment Request Update - {self.brand}",
            html=request_declined_template(patient_name, doctor_name, self.brand),
        )
