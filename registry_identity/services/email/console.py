"""Console email provider for local development."""

import uuid

from registry_identity.core.logging import get_logger
from registry_identity.services.email.base import EmailProvider

logger = get_logger(__name__)


class ConsoleEmailProvider(EmailProvider):
    """Records that an email was sent without delivering it.

    Bodies carry confirmation links, so only the envelope is logged.
    """

    def send(
        self,
        to: str,
        subject: str,
        body_text: str,
        body_html: str | None = None,
    ) -> str:
        message_id = f"console:{uuid.uuid4()}"
        logger.info(
            "EMAIL (Console Provider)",
            extra={
                "email_to": to,
                "email_subject": subject,
                "email_body_length": len(body_text),
                "message_id": message_id,
            },
        )
        return message_id
