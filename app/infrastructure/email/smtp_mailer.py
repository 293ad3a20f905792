import asyncio
import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional

from ...config import settings
from ...application.ports.mailer import Mailer

logger = logging.getLogger(__name__)


class SmtpMailer(Mailer):
    def __init__(
        self,
        host: Optional[str] = None,
        port: Optional[int] = None,
        username: Optional[str] = None,
        password: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self.host = host or settings.SMTP_HOST
        self.port = port or settings.SMTP_PORT
        self.username = username if username is not None else settings.EMAIL_USER
        self.password = password if password is not None else settings.EMAIL_APP_PASSWORD
        self.timeout = timeout or settings.SMTP_TIMEOUT_SEC

    def _build(self, to: str, subject: str, html: str) -> MIMEMultipart:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = self.username
        msg["To"] = to
        msg.attach(MIMEText(html, "html"))
        return msg

    def _send_sync(self, to: str, subject: str, html: str) -> None:
        if not self.username or not self.password:
            raise RuntimeError("SMTP credentials not configured")
        msg = self._build(to, subject, html)
        with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
            server.starttls()
            server.login(self.username, self.password)
            server.send_message(msg)
        logger.info(f"Email '{subject}' sent")

    async def send(self, to: str, subject: str, html: str) -> None:
        # smtplib blocks; keep it off the event loop
        await asyncio.to_thread(self._send_sync, to, subject, html)
