"""Base email provider interface."""

from abc import ABC, abstractmethod


class EmailProvider(ABC):
    """Base interface for email providers."""

    @abstractmethod
    def send(
        self,
        to: str,
        subject: str,
        body_text: str,
        body_html: str | None = None,
    ) -> str:
        """
        Send an email.

        Args:
            to: Recipient email address
            subject: Email subject
            body_text: Plain text email body
            body_html: Optional HTML email body

        Returns:
            Provider message ID

        Raises:
            Any exception from the transport; callers decide whether a
            failed delivery is fatal.
        """
