import asyncio
from typing import Optional

from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail, ReplyTo

from ...config import Settings
from ...domain.submission import SanitizedSubmission
from .templates import render_notification


class SendGridDeliverer:
    def __init__(
        self,
        api_key: Optional[str] = None,
        from_email: Optional[str] = None,
        to_email: Optional[str] = None,
        site_name: Optional[str] = None,
    ):
        self.api_key = api_key
        self.from_email = from_email
        self.to_email = to_email
        self.site_name = site_name
        # Only read the environment for values the caller left out
        if not all((api_key, from_email, to_email, site_name)):
            s = Settings()
            self.api_key = api_key or s.sendgrid_api_key
            self.from_email = from_email or s.email_from
            self.to_email = to_email or s.operator_email
            self.site_name = site_name or s.site_name

    def _build_message(self, submission: SanitizedSubmission) -> Mail:
        note = render_notification(submission, self.site_name)
        message = Mail(
            from_email=(self.from_email, self.site_name),
            to_emails=self.to_email,
            subject=note.subject,
            plain_text_content=note.text,
            html_content=note.html,
        )
        message.reply_to = ReplyTo(note.reply_to)
        return message

    async def deliver(self, submission: SanitizedSubmission) -> bool:
        """Send the operator notification through the SendGrid API."""
        # SendGrid client is synchronous; wrap in thread via asyncio to avoid blocking event loop
        client = SendGridAPIClient(self.api_key)
        message = self._build_message(submission)
        loop = asyncio.get_running_loop()
        response = await loop.run_in_executor(None, client.send, message)
        return 200 <= int(getattr(response, "status_code", 500)) < 300
