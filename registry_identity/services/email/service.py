"""Email provider selection and the confirmation email sink."""

from registry_identity.core.config import settings
from registry_identity.core.logging import get_logger
from registry_identity.services.email.base import EmailProvider
from registry_identity.services.email.console import ConsoleEmailProvider
from registry_identity.services.email.smtp import SMTPEmailProvider

logger = get_logger(__name__)

# Global email service instance
_email_service: EmailProvider | None = None

CONFIRM_SUBJECT = "Please confirm your email address"

CONFIRM_BODY = """Hello {login}!

Welcome to the package registry. Please click the link below to verify
your email address. Thank you!

{url}
"""


def get_email_service() -> EmailProvider:
    """Return the configured provider, building it on first use."""
    global _email_service

    if _email_service is not None:
        return _email_service

    backend = settings.EMAIL_BACKEND.lower()

    if backend in ("mailpit", "smtp"):
        _email_service = SMTPEmailProvider(
            host=settings.EMAIL_HOST,
            port=settings.EMAIL_PORT,
            from_email=settings.EMAIL_FROM,
            use_tls=settings.EMAIL_USE_TLS,
            use_ssl=settings.EMAIL_USE_SSL,
        )
        logger.info(
            f"Email service initialized: SMTP ({settings.EMAIL_HOST}:{settings.EMAIL_PORT})"
        )
    else:
        if backend != "console":
            logger.warning(f"Unknown email backend {backend!r}, using console")
        _email_service = ConsoleEmailProvider()
        logger.info("Email service initialized: Console")

    return _email_service


def send_email(
    to: str,
    subject: str,
    body_text: str,
    body_html: str | None = None,
) -> str:
    """Send an email with the configured provider; failures propagate."""
    service = get_email_service()
    return service.send(to=to, subject=subject, body_text=body_text, body_html=body_html)


def confirmation_url(token: str) -> str:
    return f"{settings.confirm_url_base}/{token}"


def send_user_confirm_email(email: str, login: str, token: str) -> str:
    """Send the address confirmation link for ``token`` to ``email``."""
    body = CONFIRM_BODY.format(login=login, url=confirmation_url(token))
    return send_email(to=email, subject=CONFIRM_SUBJECT, body_text=body)
