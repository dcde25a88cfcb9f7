import asyncio
import smtplib
from email.message import EmailMessage
from email.utils import formataddr
from typing import Optional

from ...config import Settings
from ...domain.submission import SanitizedSubmission
from .templates import render_notification

SMTPS_PORT = 465


class SmtpDeliverer:
    """Delivers notifications over SMTP, using implicit TLS on port 465 and STARTTLS otherwise."""

    def __init__(self, settings: Optional[Settings] = None, timeout: float = 30.0):
        s = settings or Settings()
        self.host = s.smtp_host
        self.port = s.smtp_port
        self.user = s.smtp_user
        self.password = s.smtp_password
        self.from_email = s.smtp_user or s.email_from
        self.to_email = s.email_to or self.from_email
        self.site_name = s.site_name
        self.timeout = timeout

    def build_message(self, submission: SanitizedSubmission) -> EmailMessage:
        note = render_notification(submission, self.site_name)
        msg = EmailMessage()
        msg["From"] = formataddr((self.site_name, self.from_email))
        msg["To"] = self.to_email
        msg["Reply-To"] = note.reply_to
        msg["Subject"] = note.subject
        msg.set_content(note.text)
        msg.add_alternative(note.html, subtype="html")
        return msg

    def _connect(self) -> smtplib.SMTP:
        # Port 465 speaks TLS from the first byte; everything else upgrades with STARTTLS
        if self.port == SMTPS_PORT:
            return smtplib.SMTP_SSL(self.host, self.port, timeout=self.timeout)
        server = smtplib.SMTP(self.host, self.port, timeout=self.timeout)
        try:
            server.starttls()
        except Exception:
            server.close()
            raise
        return server

    def _send(self, msg: EmailMessage) -> None:
        with self._connect() as server:
            if self.user and self.password:
                server.login(self.user, self.password)
            server.send_message(msg)

    async def deliver(self, submission: SanitizedSubmission) -> bool:
        msg = self.build_message(submission)
        # smtplib is blocking; run in the default executor
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, self._send, msg)
        return True
