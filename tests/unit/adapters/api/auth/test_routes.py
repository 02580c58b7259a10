import pytest

from identity_core.core.exceptions import DatabaseError, TemplateRenderError
from identity_core.domain.errors import ErrorKind
from identity_core.domain.outcome import Failure, Success
from identity_core.domain.value_objects.auth_result import AuthResult
from identity_core.domain.value_objects.identity import UserIdentity
from identity_core.domain.value_objects.token_pair import TokenPair

TOKENS = AuthResult.from_token_pair(TokenPair(access_token="A", refresh_token="R", expires_in=900))
PASSWORD = "Str0ngP@ssw0rd"


class TestLogin:
    @pytest.mark.asyncio
    async def test_success(self, async_client, orchestrator):
        orchestrator.authenticate.return_value = Success(TOKENS)

        response = await async_client.post(
            "/api/v1/auth/login", json={"username_or_email": "alice", "password": PASSWORD}
        )

        assert response.status_code == 200
        assert response.json() == {
            "access_token": "A",
            "refresh_token": "R",
            "token_type": "bearer",
            "expires_in": 900,
        }
        orchestrator.authenticate.assert_awaited_once_with("alice", PASSWORD)

    @pytest.mark.asyncio
    async def test_invalid_credentials(self, async_client, orchestrator):
        orchestrator.authenticate.return_value = Failure(ErrorKind.INVALID_CREDENTIALS)

        response = await async_client.post(
            "/api/v1/auth/login", json={"username_or_email": "alice", "password": "nope"}
        )

        assert response.status_code == 401
        assert response.json()["code"] == "invalid_credentials"
        assert response.headers["www-authenticate"] == "Bearer"

    @pytest.mark.asyncio
    async def test_user_not_found(self, async_client, orchestrator):
        orchestrator.authenticate.return_value = Failure(ErrorKind.USER_NOT_FOUND)

        response = await async_client.post(
            "/api/v1/auth/login", json={"username_or_email": "ghost", "password": "x"}
        )

        assert response.status_code == 404
        assert response.json() == {"detail": "User not found.", "code": "user_not_found"}

    @pytest.mark.asyncio
    async def test_missing_fields_rejected_before_orchestrator(self, async_client, orchestrator):
        response = await async_client.post("/api/v1/auth/login", json={"password": "x"})

        assert response.status_code == 422
        orchestrator.authenticate.assert_not_awaited()


class TestRegister:
    @pytest.mark.asyncio
    async def test_created(self, async_client, orchestrator):
        orchestrator.register.return_value = Success(TOKENS)

        response = await async_client.post(
            "/api/v1/auth/register",
            json={"username": "alice", "email": "alice@example.com", "password": PASSWORD},
        )

        assert response.status_code == 201
        assert response.json()["access_token"] == "A"
        orchestrator.register.assert_awaited_once_with("alice", "alice@example.com", PASSWORD)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "kind, status_code",
        [
            (ErrorKind.DUPLICATE_EMAIL, 409),
            (ErrorKind.DUPLICATE_USERNAME, 409),
            (ErrorKind.VALIDATION_ERROR, 422),
            (ErrorKind.ISSUANCE_ERROR, 503),
        ],
    )
    async def test_failures(self, async_client, orchestrator, kind, status_code):
        orchestrator.register.return_value = Failure(kind)

        response = await async_client.post(
            "/api/v1/auth/register",
            json={"username": "alice", "email": "alice@example.com", "password": PASSWORD},
        )

        assert response.status_code == status_code
        assert response.json()["code"] == kind.value

    @pytest.mark.asyncio
    async def test_database_fault_is_generic_500(self, async_client, orchestrator):
        orchestrator.register.side_effect = DatabaseError()

        response = await async_client.post(
            "/api/v1/auth/register",
            json={"username": "alice", "email": "alice@example.com", "password": PASSWORD},
        )

        assert response.status_code == 500
        assert response.json() == {"detail": "A database error occurred.", "code": "database_error"}


class TestRefresh:
    @pytest.mark.asyncio
    async def test_success(self, async_client, orchestrator):
        orchestrator.refresh.return_value = Success(TOKENS)

        response = await async_client.post("/api/v1/auth/refresh", json={"refresh_token": "R0"})

        assert response.status_code == 200
        assert response.json()["refresh_token"] == "R"
        orchestrator.refresh.assert_awaited_once_with("R0")

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "kind", [ErrorKind.EXPIRED_TOKEN, ErrorKind.REVOKED_TOKEN, ErrorKind.MALFORMED_TOKEN]
    )
    async def test_rejected_tokens(self, async_client, orchestrator, kind):
        orchestrator.refresh.return_value = Failure(kind)

        response = await async_client.post("/api/v1/auth/refresh", json={"refresh_token": "R0"})

        assert response.status_code == 401
        assert response.json()["code"] == kind.value


class TestConfirmEmail:
    @pytest.mark.asyncio
    async def test_success_returns_identity(self, async_client, orchestrator):
        identity = UserIdentity(id="u1", username="alice", email="alice@example.com", email_confirmed=True)
        orchestrator.confirm_email.return_value = Success(AuthResult.from_identity(identity))

        response = await async_client.post(
            "/api/v1/auth/confirm-email", json={"email": "alice@example.com", "token": "t0k3n"}
        )

        assert response.status_code == 200
        assert response.json() == {
            "id": "u1",
            "username": "alice",
            "email": "alice@example.com",
            "email_confirmed": True,
        }

    @pytest.mark.asyncio
    async def test_invalid_token(self, async_client, orchestrator):
        orchestrator.confirm_email.return_value = Failure(ErrorKind.INVALID_OR_EXPIRED_TOKEN)

        response = await async_client.post(
            "/api/v1/auth/confirm-email", json={"email": "alice@example.com", "token": "t0k3n"}
        )

        assert response.status_code == 401
        assert response.json()["code"] == "invalid_or_expired_token"


class TestResendConfirmation:
    @pytest.mark.asyncio
    async def test_accepted(self, async_client, orchestrator):
        orchestrator.send_confirmation_email.return_value = Success(None)

        response = await async_client.post(
            "/api/v1/auth/resend-confirmation", json={"email": "alice@example.com"}
        )

        assert response.status_code == 202
        assert response.json()["message"] == "Confirmation email sent."
        orchestrator.send_confirmation_email.assert_awaited_once_with("alice@example.com")

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "kind, status_code",
        [
            (ErrorKind.EMAIL_ALREADY_CONFIRMED, 409),
            (ErrorKind.USER_NOT_FOUND, 404),
            (ErrorKind.DELIVERY_ERROR, 503),
        ],
    )
    async def test_failures(self, async_client, orchestrator, kind, status_code):
        orchestrator.send_confirmation_email.return_value = Failure(kind)

        response = await async_client.post(
            "/api/v1/auth/resend-confirmation", json={"email": "alice@example.com"}
        )

        assert response.status_code == status_code
        assert response.json()["code"] == kind.value

    @pytest.mark.asyncio
    async def test_template_fault_is_503(self, async_client, orchestrator):
        orchestrator.send_confirmation_email.side_effect = TemplateRenderError("Template file not found: x")

        response = await async_client.post(
            "/api/v1/auth/resend-confirmation", json={"email": "alice@example.com"}
        )

        assert response.status_code == 503
        assert response.json()["code"] == "template_render_error"
        assert "x" not in response.json()["detail"]
