"""Outbound notification interface."""

from abc import ABC, abstractmethod

from identity_core.domain.outcome import Outcome


class INotificationSender(ABC):
    """Delivers user-facing notifications."""

    @abstractmethod
    async def send_confirmation_email(
        self, email: str, display_name: str, link: str
    ) -> Outcome[None]:
        """Sends the email-confirmation message.

        Args:
            email: Recipient address.
            display_name: Name used to greet the recipient.
            link: Absolute confirmation link.

        Returns:
            ``Success(None)`` or ``Failure(DELIVERY_ERROR)``.
        """
        raise NotImplementedError
