"""Password value objects.

These value objects encapsulate password strength rules and hashing, so that
only policy-compliant passwords are ever hashed and stored.
"""

import re
from dataclasses import dataclass, field
from typing import ClassVar

from identity_core.utils.security import hash_password, verify_password


@dataclass(frozen=True)
class Password:
    """Password value object that enforces security requirements.

    Security Requirements:
        - Minimum 8 characters
        - Maximum 128 characters
        - At least one uppercase letter
        - At least one lowercase letter
        - At least one digit
        - At least one special character

    Attributes:
        value: The raw password string (immutable, hidden from repr)
    """

    value: str = field(repr=False)

    MIN_LENGTH: ClassVar[int] = 8
    MAX_LENGTH: ClassVar[int] = 128
    SPECIAL_CHARS: ClassVar[str] = "!@#$%^&*()_+-=[]{}|;:,.<>?"

    def __post_init__(self) -> None:
        """Validate password on construction.

        Raises:
            ValueError: If password doesn't meet security requirements
        """
        if not self.value:
            raise ValueError("Password cannot be empty")

        if len(self.value) < self.MIN_LENGTH:
            raise ValueError(f"Password must be at least {self.MIN_LENGTH} characters long")

        if len(self.value) > self.MAX_LENGTH:
            raise ValueError(f"Password must not exceed {self.MAX_LENGTH} characters")

        if not re.search(r"[A-Z]", self.value):
            raise ValueError("Password must contain at least one uppercase letter")

        if not re.search(r"[a-z]", self.value):
            raise ValueError("Password must contain at least one lowercase letter")

        if not re.search(r"\d", self.value):
            raise ValueError("Password must contain at least one digit")

        if not any(char in self.SPECIAL_CHARS for char in self.value):
            raise ValueError("Password must contain at least one special character")

    def to_hashed(self) -> "HashedPassword":
        """Hash this password. CPU bound; callers on the event loop should
        run it in a worker thread."""
        return HashedPassword(value=hash_password(self.value))


@dataclass(frozen=True)
class HashedPassword:
    """A bcrypt hash that can be safely stored.

    Attributes:
        value: The hashed password string (immutable)
    """

    value: str

    BCRYPT_PREFIXES: ClassVar[tuple] = ("$2b$", "$2a$", "$2y$")

    def __post_init__(self) -> None:
        if not self.value:
            raise ValueError("Hashed password cannot be empty")
        if not self.value.startswith(self.BCRYPT_PREFIXES) or len(self.value) != 60:
            raise ValueError("Invalid hashed password format")

    def matches(self, plain_password: str) -> bool:
        """Constant-time check of ``plain_password`` against this hash.

        Returns False for any verification error so that malformed hashes
        never disclose anything through exceptions.
        """
        try:
            return verify_password(plain_password, self.value)
        except (ValueError, TypeError):
            return False

    def __str__(self) -> str:
        return self.value
