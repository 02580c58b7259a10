"""Identity value objects exchanged between the orchestrator and the store."""

from dataclasses import dataclass, field

from identity_core.domain.value_objects.email import mask_email


@dataclass(frozen=True, slots=True)
class UserIdentity:
    """Read-only projection of a stored user.

    The orchestrator only reads ``id`` and ``email`` for token issuance and
    ``username``/``email_confirmed`` for the confirmation flow.
    """

    id: str
    username: str
    email: str
    email_confirmed: bool = False


@dataclass(frozen=True, slots=True)
class Credentials:
    """Transient login input. The password never appears in ``repr``."""

    username_or_email: str
    password: str = field(repr=False)

    def mask_for_logging(self) -> str:
        if "@" in self.username_or_email:
            return mask_email(self.username_or_email)
        return self.username_or_email[:2] + "***"
