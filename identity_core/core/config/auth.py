"""Authentication settings: JWT signing, token lifetimes and password hashing.
"""

import logging
from pathlib import Path

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)

DEVELOPMENT_SIGNING_KEY = "development-only-signing-key-change-me-0123456789"


class AuthSettings(BaseSettings):
    """Defines settings for token issuance and credential storage.

    HS* algorithms sign and verify with JWT_SIGNING_KEY. RS*/ES* algorithms
    sign with JWT_SIGNING_KEY (a PEM private key) and verify with
    JWT_VERIFYING_KEY; both may be supplied through private.pem/public.pem.

    Security Note:
        - JWT keys must be securely stored and rotated regularly to prevent token forgery
          (OWASP A02:2021 - Cryptographic Failures).
        - The development signing key is rejected outside development and test.
    """

    JWT_ALGORITHM: str = Field(default="HS256", pattern="^(HS|RS|ES)(256|384|512)$")
    JWT_SIGNING_KEY: SecretStr = SecretStr(DEVELOPMENT_SIGNING_KEY)
    JWT_VERIFYING_KEY: str = ""
    JWT_ISSUER: str = "https://identity.example.com"
    JWT_AUDIENCE: str = "identity-core:api:v1"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(ge=1, default=15)
    REFRESH_TOKEN_EXPIRE_DAYS: int = Field(ge=1, default=7)

    BCRYPT_WORK_FACTOR: int = Field(ge=4, le=31, default=12)

    @model_validator(mode="after")
    def _load_and_validate_jwt_keys(self) -> "AuthSettings":
        """Loads asymmetric keys from PEM files and checks the key pair is complete.

        Returns:
            Self instance with loaded keys.
        """
        if self.JWT_ALGORITHM.startswith("HS"):
            return self

        self._load_keys_from_pem_files()
        if not self.JWT_VERIFYING_KEY:
            error_msg = (
                f"{self.JWT_ALGORITHM} requires JWT_VERIFYING_KEY, either via .env "
                "or through a public.pem file."
            )
            logger.error(error_msg)
            raise ValueError(error_msg)
        return self

    def _load_keys_from_pem_files(self) -> None:
        """Loads JWT keys from private.pem and public.pem if they exist.
        These files override any existing environment variables.
        """
        private_key_path = Path("private.pem").resolve()
        public_key_path = Path("public.pem").resolve()

        if private_key_path.is_file():
            private_key = private_key_path.read_text().strip()
            if private_key:
                self.JWT_SIGNING_KEY = SecretStr(private_key)
                logger.info("Loaded JWT signing key from private.pem.")

        if public_key_path.is_file():
            public_key = public_key_path.read_text().strip()
            if public_key:
                self.JWT_VERIFYING_KEY = public_key
                logger.info("Loaded JWT verifying key from public.pem.")

    @property
    def jwt_verifying_key(self) -> str:
        """Key used to verify signatures for the configured algorithm."""
        if self.JWT_ALGORITHM.startswith("HS"):
            return self.JWT_SIGNING_KEY.get_secret_value()
        return self.JWT_VERIFYING_KEY
