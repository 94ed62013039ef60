"""SMTP email provider."""

import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import make_msgid

from registry_identity.core.logging import get_logger
from registry_identity.services.email.base import EmailProvider

logger = get_logger(__name__)


class SMTPEmailProvider(EmailProvider):
    """SMTP email provider (also used for Mailpit in development)."""

    def __init__(
        self,
        host: str,
        port: int,
        from_email: str,
        use_tls: bool = False,
        use_ssl: bool = False,
    ):
        self.host = host
        self.port = port
        self.from_email = from_email
        self.use_tls = use_tls
        self.use_ssl = use_ssl

    def send(
        self,
        to: str,
        subject: str,
        body_text: str,
        body_html: str | None = None,
    ) -> str:
        """Send email via SMTP. Transport errors propagate to the caller."""
        msg = MIMEMultipart("alternative")
        msg["From"] = self.from_email
        msg["To"] = to
        msg["Subject"] = subject
        msg["Message-ID"] = make_msgid()

        msg.attach(MIMEText(body_text, "plain"))
        if body_html:
            msg.attach(MIMEText(body_html, "html"))

        try:
            if self.use_ssl:
                server = smtplib.SMTP_SSL(self.host, self.port)
            else:
                server = smtplib.SMTP(self.host, self.port)

            try:
                if self.use_tls:
                    server.starttls()
                server.send_message(msg)
            finally:
                server.quit()
        except Exception as e:
            logger.error(
                f"Failed to send email to {to}: {e}",
                extra={"email_to": to, "email_subject": subject},
                exc_info=True,
            )
            raise

        logger.info(
            f"Email sent successfully to {to}", extra={"email_to": to, "email_subject": subject}
        )
        return msg["Message-ID"]
