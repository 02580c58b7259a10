"""JWT token issuer.

Access and refresh tokens are PyJWT tokens carrying ``sub``, ``email``,
``iss``, ``aud``, ``iat``, ``exp``, ``jti`` and ``typ``. Each outstanding
refresh token is tracked in Redis as the SHA-256 hash of the encoded token,
keyed by its ``jti`` and expiring with the token. Rotation checks the entry
under ``WATCH`` and swaps it for the new one in a ``MULTI``/``EXEC`` block, so
a refresh token can be exchanged only once and a failed rotation leaves it
usable.
"""

import hashlib
import hmac
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any, Mapping, Optional

import jwt
from redis.asyncio import Redis
from redis.exceptions import RedisError, WatchError
from structlog import get_logger

from identity_core.core.config.settings import settings
from identity_core.domain.errors import ErrorKind
from identity_core.domain.interfaces.token_issuer import ITokenIssuer
from identity_core.domain.outcome import Failure, Outcome, Success
from identity_core.domain.value_objects.email import mask_email
from identity_core.domain.value_objects.token_pair import TokenPair

logger = get_logger(__name__)

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"


class JwtTokenIssuer(ITokenIssuer):
    """Issues and rotates JWT token pairs.

    Attributes:
        redis_client (Redis): Async Redis client for refresh-token bookkeeping.
        access_ttl (timedelta): Access token lifetime.
        refresh_ttl (timedelta): Refresh token lifetime.
    """

    def __init__(
        self,
        redis_client: Redis,
        signing_key: Optional[str] = None,
        verifying_key: Optional[str] = None,
        algorithm: Optional[str] = None,
        issuer: Optional[str] = None,
        audience: Optional[str] = None,
        access_ttl: Optional[timedelta] = None,
        refresh_ttl: Optional[timedelta] = None,
    ):
        self.redis_client = redis_client
        self.algorithm = algorithm or settings.JWT_ALGORITHM
        self.signing_key = signing_key or settings.JWT_SIGNING_KEY.get_secret_value()
        if verifying_key:
            self.verifying_key = verifying_key
        elif self.algorithm.startswith("HS"):
            self.verifying_key = self.signing_key
        else:
            self.verifying_key = settings.jwt_verifying_key
        self.issuer = issuer or settings.JWT_ISSUER
        self.audience = audience or settings.JWT_AUDIENCE
        self.access_ttl = access_ttl or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
        self.refresh_ttl = refresh_ttl or timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS)

    async def generate(self, user_id: str, email: str) -> Outcome[TokenPair]:
        """Mint a new pair and record the refresh token in Redis.

        Returns:
            ``Success(TokenPair)``, or ``Failure(ISSUANCE_ERROR)`` when signing
            or the Redis write fails.
        """
        try:
            pair, jti = self._mint(user_id, email)
        except (jwt.PyJWTError, ValueError, TypeError) as e:
            logger.error("Token signing failed", user_id=user_id, error_type=type(e).__name__)
            return Failure(ErrorKind.ISSUANCE_ERROR)

        try:
            await self.redis_client.setex(
                self._redis_key(jti),
                self._refresh_ttl_seconds,
                self._hash(pair.refresh_token),
            )
        except RedisError as e:
            logger.error("Refresh token could not be stored", user_id=user_id, error_type=type(e).__name__)
            return Failure(ErrorKind.ISSUANCE_ERROR)

        logger.debug("Token pair issued", user_id=user_id, email=mask_email(email), jti=jti[:8])
        return Success(pair)

    async def rotate(self, refresh_token: str) -> Outcome[TokenPair]:
        """Exchange ``refresh_token`` for a new pair.

        The old entry is deleted and the new one written in a single
        ``MULTI``/``EXEC`` block guarded by ``WATCH``. When issuance fails the
        presented token stays valid and the caller may retry with it.

        Returns:
            ``Success(TokenPair)`` or ``Failure`` with EXPIRED_TOKEN,
            MALFORMED_TOKEN (undecodable, bad signature, wrong type),
            REVOKED_TOKEN (unknown or already used) or ISSUANCE_ERROR.
        """
        try:
            payload = self._decode(refresh_token)
        except jwt.ExpiredSignatureError:
            logger.info("Expired refresh token presented")
            return Failure(ErrorKind.EXPIRED_TOKEN)
        except jwt.PyJWTError as e:
            logger.warning("Refresh token rejected", error_type=type(e).__name__)
            return Failure(ErrorKind.MALFORMED_TOKEN)

        if payload.get("typ") != REFRESH_TOKEN_TYPE or not payload.get("jti") or not payload.get("sub"):
            logger.warning("Token presented for refresh is not a refresh token")
            return Failure(ErrorKind.MALFORMED_TOKEN)

        jti = payload["jti"]
        user_id = payload["sub"]
        try:
            pair, new_jti = self._mint(user_id, payload.get("email", ""))
        except (jwt.PyJWTError, ValueError, TypeError) as e:
            logger.error("Token signing failed", user_id=user_id, error_type=type(e).__name__)
            return Failure(ErrorKind.ISSUANCE_ERROR)

        try:
            swapped = await self._swap(
                self._redis_key(jti),
                self._hash(refresh_token),
                self._redis_key(new_jti),
                self._hash(pair.refresh_token),
            )
        except RedisError as e:
            logger.error("Refresh token rotation failed", jti=jti[:8], error_type=type(e).__name__)
            return Failure(ErrorKind.ISSUANCE_ERROR)

        if not swapped:
            logger.warning("Revoked or replayed refresh token", jti=jti[:8], user_id=user_id)
            return Failure(ErrorKind.REVOKED_TOKEN)

        logger.info("Refresh token rotated", user_id=user_id, jti=jti[:8], new_jti=new_jti[:8])
        return Success(pair)

    async def _swap(self, old_key: str, presented_hash: str, new_key: str, new_hash: str) -> bool:
        """Replace ``old_key`` by ``new_key`` if it still holds ``presented_hash``.

        Returns False when the entry is missing, does not match, or was
        consumed concurrently between ``WATCH`` and ``EXEC``.
        """
        async with self.redis_client.pipeline(transaction=True) as pipe:
            try:
                await pipe.watch(old_key)
                stored_hash = await pipe.get(old_key)
                if isinstance(stored_hash, bytes):
                    stored_hash = stored_hash.decode()
                if not stored_hash or not hmac.compare_digest(stored_hash, presented_hash):
                    await pipe.unwatch()
                    return False
                pipe.multi()
                pipe.delete(old_key)
                pipe.setex(new_key, self._refresh_ttl_seconds, new_hash)
                await pipe.execute()
            except WatchError:
                return False
        return True

    def _mint(self, user_id: str, email: str) -> tuple[TokenPair, str]:
        access_token, _ = self._encode(user_id, email, ACCESS_TOKEN_TYPE, self.access_ttl)
        refresh_token, jti = self._encode(user_id, email, REFRESH_TOKEN_TYPE, self.refresh_ttl)
        pair = TokenPair(
            access_token=access_token,
            refresh_token=refresh_token,
            token_type="bearer",
            expires_in=int(self.access_ttl.total_seconds()),
        )
        return pair, jti

    @property
    def _refresh_ttl_seconds(self) -> int:
        return int(self.refresh_ttl.total_seconds())

    def _encode(self, user_id: str, email: str, token_type: str, ttl: timedelta) -> tuple[str, str]:
        now = datetime.now(timezone.utc)
        jti = secrets.token_urlsafe(32)
        payload = {
            "sub": str(user_id),
            "email": email,
            "iss": self.issuer,
            "aud": self.audience,
            "iat": now,
            "exp": now + ttl,
            "jti": jti,
            "typ": token_type,
        }
        return jwt.encode(payload, self.signing_key, algorithm=self.algorithm), jti

    def _decode(self, token: str) -> Mapping[str, Any]:
        return jwt.decode(
            token,
            self.verifying_key,
            algorithms=[self.algorithm],
            issuer=self.issuer,
            audience=self.audience,
            options={"require": ["exp", "iat", "jti", "sub"]},
        )

    @staticmethod
    def _hash(token: str) -> str:
        return hashlib.sha256(token.encode()).hexdigest()

    @staticmethod
    def _redis_key(jti: str) -> str:
        """Redis key under which the refresh-token hash is stored."""
        return f"refresh_token:{jti}"
