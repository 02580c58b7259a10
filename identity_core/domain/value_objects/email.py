"""A Value Object representing an email address in the domain.

This class encapsulates the properties and validation rules of an email
address, ensuring that any email in the domain is always in a valid state.
Equality is based on the normalized value.
"""

import re
from dataclasses import dataclass
from typing import ClassVar


@dataclass(frozen=True, slots=True)
class Email:
    """An immutable, self-validating email address.

    Business rules enforced upon instantiation:
    - Conforms to a standard email format.
    - Has a reasonable length.
    - Is automatically normalized to lowercase.
    - Belongs to a non-disposable domain.

    Attributes:
        value: The string representation of the email address.
    """

    value: str

    MAX_LENGTH: ClassVar[int] = 254
    MIN_LENGTH: ClassVar[int] = 5
    EMAIL_PATTERN: ClassVar[re.Pattern] = re.compile(
        r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"
    )
    BLOCKED_DOMAINS: ClassVar[frozenset] = frozenset(
        {
            "10minutemail.com",
            "tempmail.org",
            "guerrillamail.com",
            "mailinator.com",
            "yopmail.com",
            "throwaway.email",
            "temp-mail.org",
            "trashmail.com",
        }
    )

    def __post_init__(self):
        """Performs validation and normalization after initialization."""
        if not isinstance(self.value, str):
            raise TypeError("Email value must be a string.")

        normalized_value = self.value.strip().lower()
        object.__setattr__(self, "value", normalized_value)

        if not (self.MIN_LENGTH <= len(normalized_value) <= self.MAX_LENGTH):
            raise ValueError(
                f"Email length must be between {self.MIN_LENGTH} and {self.MAX_LENGTH} characters."
            )
        if not self.EMAIL_PATTERN.match(normalized_value):
            raise ValueError("Invalid email format.")
        if self.domain in self.BLOCKED_DOMAINS:
            raise ValueError("Disposable email providers are not allowed.")

    @property
    def domain(self) -> str:
        """Returns the domain part of the email address."""
        return self.value.split("@")[1]

    def mask_for_logging(self) -> str:
        """Returns a masked version of the email for safe logging.

        Example: 'us**@e*****.com'
        """
        return mask_email(self.value)

    def __str__(self) -> str:
        return self.value


def mask_email(email: str) -> str:
    """Mask an arbitrary (possibly invalid) email string for logs."""
    if not email or "@" not in email:
        return "***"
    local, domain_part = email.split("@", 1)
    masked_local = f"{local[:2]}{'*' * max(len(local) - 2, 0)}"
    masked_domain = f"{domain_part[:1]}{'*' * max(len(domain_part) - 2, 0)}{domain_part[-1:]}"
    return f"{masked_local}@{masked_domain}"
