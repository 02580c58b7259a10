"""Email confirmation token value object."""

import secrets
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import ClassVar


@dataclass(frozen=True)
class ConfirmationToken:
    """A single-use secret proving control of an email address."""

    value: str
    expires_at: datetime = field(compare=False)

    LENGTH: ClassVar[int] = 64

    @classmethod
    def generate(cls, ttl: timedelta) -> "ConfirmationToken":
        # 32 bytes of entropy (~256 bits), hex encoded to LENGTH characters
        return cls(
            value=secrets.token_hex(cls.LENGTH // 2),
            expires_at=datetime.now(timezone.utc) + ttl,
        )

    def matches(self, candidate: str, now: datetime | None = None) -> bool:
        """Constant-time comparison that also rejects expired tokens."""
        now = now or datetime.now(timezone.utc)
        if now >= self.expires_at:
            return False
        return secrets.compare_digest(self.value.encode(), (candidate or "").encode())

    def mask_for_logging(self) -> str:
        return f"{self.value[:8]}..."
