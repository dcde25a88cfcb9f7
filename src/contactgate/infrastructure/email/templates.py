"""Operator notification rendering shared by all mail transports."""

import html
from dataclasses import dataclass

from ...domain.submission import SanitizedSubmission


@dataclass(slots=True)
class Notification:
    subject: str
    text: str
    html: str
    reply_to: str


def render_notification(submission: SanitizedSubmission, site_name: str) -> Notification:
    """Build the operator email for an already sanitized submission.

    Subject, reason and message arrive HTML-escaped. The email address is kept
    raw for the Reply-To header and escaped only where it enters the HTML body.
    """
    subject = f"[{site_name}] {html.unescape(submission.subject)}: {html.unescape(submission.reason)}"
    text = f"From: {submission.email}\n\nMessage:\n{html.unescape(submission.message)}"
    body = f"""
      <div style="font-family: sans-serif; padding: 20px; border: 1px solid #ccc; border-radius: 8px;">
        <h2 style="color: #0f172a;">New Message from {html.escape(site_name)}</h2>
        <p><strong>From:</strong> {html.escape(submission.email)}</p>
        <p><strong>Subject:</strong> {submission.subject}</p>
        <p><strong>Priority:</strong> {submission.reason}</p>
        <hr />
        <p style="white-space: pre-wrap;">{submission.message}</p>
      </div>
    """
    return Notification(subject=subject, text=text, html=body, reply_to=submission.email)
