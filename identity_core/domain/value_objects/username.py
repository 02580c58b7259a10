"""Username value object for domain modeling."""

import re
from dataclasses import dataclass
from typing import ClassVar


@dataclass(frozen=True, slots=True)
class Username:
    """Immutable, self-validating username.

    Enforces username format requirements:
    - 3-30 characters in length
    - Alphanumeric characters, underscores, hyphens only
    - Cannot start or end with underscore or hyphen
    - No consecutive special characters
    - Case-insensitive (stored as lowercase)
    """

    value: str

    MIN_LENGTH: ClassVar[int] = 3
    MAX_LENGTH: ClassVar[int] = 30
    ALLOWED_PATTERN: ClassVar[re.Pattern] = re.compile(r"^[a-z0-9](?:[a-z0-9]|[_-](?=[a-z0-9]))*$")

    def __post_init__(self):
        if not isinstance(self.value, str) or not self.value.strip():
            raise ValueError("Username cannot be empty")

        normalized_value = self.value.strip().lower()
        object.__setattr__(self, "value", normalized_value)

        if not (self.MIN_LENGTH <= len(normalized_value) <= self.MAX_LENGTH):
            raise ValueError(
                f"Username must be between {self.MIN_LENGTH} and {self.MAX_LENGTH} characters"
            )
        if not self.ALLOWED_PATTERN.match(normalized_value):
            raise ValueError(
                "Username may only contain letters, digits, and single underscores or hyphens "
                "between them"
            )

    def mask_for_logging(self) -> str:
        """Return masked username for safe logging (first 2 chars + asterisks)."""
        if len(self.value) <= 2:
            return "*" * len(self.value)
        return self.value[:2] + "*" * (len(self.value) - 2)

    def __str__(self) -> str:
        return self.value
