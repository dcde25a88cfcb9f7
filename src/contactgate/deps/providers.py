"""Singleton providers for application-wide services and clients.

This module handles lazy initialization of Settings and the choice of mail
transport, and exposes the gate service that wiring stored on app.state.
"""

from fastapi import Request

from ..config import Settings
from ..infrastructure.email.mock import MockDeliverer
from ..logging_config import get_logger
from ..ports.delivery import MessageDeliverer
from ..services.submission_service import SubmissionService

logger = get_logger(__name__)

# Lazy singletons to avoid import-time side-effects
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create singleton Settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def build_deliverer(settings: Settings) -> MessageDeliverer:
    """Pick the mail transport: SendGrid if configured, then SMTP, else mock."""
    if settings.sendgrid_api_key:
        from ..infrastructure.email.sendgrid import SendGridDeliverer

        return SendGridDeliverer(
            api_key=settings.sendgrid_api_key,
            from_email=settings.email_from,
            to_email=settings.operator_email,
            site_name=settings.site_name,
        )
    if settings.smtp_host and settings.smtp_user:
        from ..infrastructure.email.smtp import SmtpDeliverer

        return SmtpDeliverer(settings)
    logger.warning("no_mail_transport_configured", fallback="mock")
    return MockDeliverer()


def get_submission_service(request: Request) -> SubmissionService:
    """Get the process-wide SubmissionService created by wiring.create_app()."""
    service = getattr(request.app.state, "submission_service", None)
    if service is None:
        raise RuntimeError("submission service not initialized on app.state")
    return service  # type: ignore[no-any-return]


def get_app_settings(request: Request) -> Settings:
    """Settings the app was built with, falling back to the singleton."""
    settings = getattr(request.app.state, "settings", None)
    return settings if settings is not None else get_settings()
