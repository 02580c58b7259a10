from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock

import jwt
import pytest
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import WatchError

from identity_core.domain.errors import ErrorKind
from identity_core.infrastructure.services.token_issuer import JwtTokenIssuer

SIGNING_KEY = "unit-test-signing-key-0123456789abcdef"
ISSUER = "https://identity.test"
AUDIENCE = "identity-core:test"


class FakePipeline:
    """WATCH/MULTI/EXEC over FakeRedis; queued commands apply only on execute."""

    def __init__(self, redis):
        self.redis = redis
        self.watched = {}
        self.queued = []

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        self.watched.clear()
        self.queued.clear()

    async def watch(self, key):
        self.watched[key] = self.redis.store.get(key)

    async def unwatch(self):
        self.watched.clear()

    async def get(self, key):
        return self.redis.store.get(key)

    def multi(self):
        self.queued = []

    def delete(self, key):
        self.queued.append(("delete", key))

    def setex(self, key, ttl, value):
        self.queued.append(("setex", key, ttl, value))

    async def execute(self):
        if self.redis.before_execute:
            self.redis.before_execute()
        if self.redis.execute_error:
            raise self.redis.execute_error
        if any(self.redis.store.get(key) != value for key, value in self.watched.items()):
            raise WatchError("watched key changed")
        for command, key, *args in self.queued:
            if command == "delete":
                self.redis.store.pop(key, None)
            else:
                ttl, value = args
                self.redis.store[key] = value
                self.redis.ttls[key] = ttl


class FakeRedis:
    """Just enough of redis.asyncio.Redis for refresh-token bookkeeping."""

    def __init__(self):
        self.store = {}
        self.ttls = {}
        self.execute_error = None
        self.before_execute = None

    async def setex(self, key, ttl, value):
        self.store[key] = value
        self.ttls[key] = ttl

    def pipeline(self, transaction=True):
        return FakePipeline(self)


@pytest.fixture
def redis_client():
    return FakeRedis()


@pytest.fixture
def issuer(redis_client):
    return JwtTokenIssuer(
        redis_client,
        signing_key=SIGNING_KEY,
        algorithm="HS256",
        issuer=ISSUER,
        audience=AUDIENCE,
        access_ttl=timedelta(minutes=15),
        refresh_ttl=timedelta(days=7),
    )


def _decode(token):
    return jwt.decode(token, SIGNING_KEY, algorithms=["HS256"], issuer=ISSUER, audience=AUDIENCE)


@pytest.mark.asyncio
async def test_generate_issues_typed_tokens(issuer, redis_client):
    outcome = await issuer.generate("u1", "alice@x.com")

    assert outcome.is_success
    pair = outcome.value
    access = _decode(pair.access_token)
    refresh = _decode(pair.refresh_token)
    assert access["sub"] == refresh["sub"] == "u1"
    assert access["email"] == "alice@x.com"
    assert access["typ"] == "access"
    assert refresh["typ"] == "refresh"
    assert access["jti"] != refresh["jti"]
    assert pair.token_type == "bearer"
    assert pair.expires_in == 900
    key = f"refresh_token:{refresh['jti']}"
    assert key in redis_client.store
    assert pair.refresh_token not in redis_client.store.values()
    assert redis_client.ttls[key] == 7 * 24 * 3600


@pytest.mark.asyncio
async def test_rotate_consumes_refresh_token(issuer):
    first = (await issuer.generate("u1", "alice@x.com")).value

    rotated = await issuer.rotate(first.refresh_token)
    replayed = await issuer.rotate(first.refresh_token)

    assert rotated.is_success
    assert rotated.value.refresh_token != first.refresh_token
    assert _decode(rotated.value.access_token)["sub"] == "u1"
    assert replayed.kind is ErrorKind.REVOKED_TOKEN


@pytest.mark.asyncio
async def test_rotated_token_can_itself_be_rotated(issuer):
    first = (await issuer.generate("u1", "alice@x.com")).value
    second = (await issuer.rotate(first.refresh_token)).value

    third = await issuer.rotate(second.refresh_token)

    assert third.is_success


@pytest.mark.asyncio
async def test_rotate_expired_token(issuer):
    now = datetime.now(timezone.utc)
    expired = jwt.encode(
        {
            "sub": "u1",
            "iss": ISSUER,
            "aud": AUDIENCE,
            "iat": now - timedelta(days=8),
            "exp": now - timedelta(days=1),
            "jti": "old",
            "typ": "refresh",
        },
        SIGNING_KEY,
        algorithm="HS256",
    )

    outcome = await issuer.rotate(expired)

    assert outcome.kind is ErrorKind.EXPIRED_TOKEN


@pytest.mark.asyncio
@pytest.mark.parametrize("token", ["", "garbage", "a.b.c"])
async def test_rotate_undecodable_token(issuer, token):
    outcome = await issuer.rotate(token)

    assert outcome.kind is ErrorKind.MALFORMED_TOKEN


@pytest.mark.asyncio
async def test_rotate_rejects_foreign_signature(issuer):
    now = datetime.now(timezone.utc)
    forged = jwt.encode(
        {"sub": "u1", "iss": ISSUER, "aud": AUDIENCE, "iat": now, "exp": now + timedelta(days=1), "jti": "x", "typ": "refresh"},
        "another-key-that-is-long-enough-0123456789",
        algorithm="HS256",
    )

    outcome = await issuer.rotate(forged)

    assert outcome.kind is ErrorKind.MALFORMED_TOKEN


@pytest.mark.asyncio
async def test_rotate_rejects_access_token(issuer):
    pair = (await issuer.generate("u1", "alice@x.com")).value

    outcome = await issuer.rotate(pair.access_token)

    assert outcome.kind is ErrorKind.MALFORMED_TOKEN


@pytest.mark.asyncio
async def test_rotate_unknown_jti_is_revoked(issuer, redis_client):
    pair = (await issuer.generate("u1", "alice@x.com")).value
    redis_client.store.clear()

    outcome = await issuer.rotate(pair.refresh_token)

    assert outcome.kind is ErrorKind.REVOKED_TOKEN


@pytest.mark.asyncio
async def test_redis_outage_is_issuance_error():
    redis_client = AsyncMock()
    redis_client.setex.side_effect = RedisConnectionError("down")
    issuer = JwtTokenIssuer(redis_client, signing_key=SIGNING_KEY, algorithm="HS256")

    outcome = await issuer.generate("u1", "alice@x.com")

    assert outcome.kind is ErrorKind.ISSUANCE_ERROR


@pytest.mark.asyncio
async def test_signing_error_is_issuance_error(redis_client):
    issuer = JwtTokenIssuer(redis_client, signing_key="not-a-pem-key", algorithm="RS256", verifying_key="x")

    outcome = await issuer.generate("u1", "alice@x.com")

    assert outcome.kind is ErrorKind.ISSUANCE_ERROR
    assert redis_client.store == {}


@pytest.mark.asyncio
async def test_failed_rotation_keeps_presented_token_usable(issuer, redis_client):
    pair = (await issuer.generate("u1", "alice@x.com")).value
    stored_before = dict(redis_client.store)
    redis_client.execute_error = RedisConnectionError("connection reset")

    first = await issuer.rotate(pair.refresh_token)

    assert first.kind is ErrorKind.ISSUANCE_ERROR
    assert redis_client.store == stored_before

    redis_client.execute_error = None
    retry = await issuer.rotate(pair.refresh_token)

    assert retry.is_success
    assert (await issuer.rotate(pair.refresh_token)).kind is ErrorKind.REVOKED_TOKEN


@pytest.mark.asyncio
async def test_rotation_lost_to_concurrent_exchange_is_revoked(issuer, redis_client):
    pair = (await issuer.generate("u1", "alice@x.com")).value
    old_key = f"refresh_token:{_decode(pair.refresh_token)['jti']}"
    redis_client.before_execute = lambda: redis_client.store.pop(old_key, None)

    outcome = await issuer.rotate(pair.refresh_token)

    assert outcome.kind is ErrorKind.REVOKED_TOKEN
    assert redis_client.store == {}


@pytest.mark.asyncio
async def test_rotate_with_mismatched_hash_is_revoked(issuer, redis_client):
    pair = (await issuer.generate("u1", "alice@x.com")).value
    old_key = f"refresh_token:{_decode(pair.refresh_token)['jti']}"
    redis_client.store[old_key] = "0" * 64

    outcome = await issuer.rotate(pair.refresh_token)

    assert outcome.kind is ErrorKind.REVOKED_TOKEN
    assert list(redis_client.store) == [old_key]
