"""
Unit tests for the authentication request dispatcher.

Tests cover:
- Mapping of service replies to outcomes
- Token persistence on success
- Client-side password confirmation
- Session store failures
"""

import pytest

from FitAI.api.client import ApiResult
from FitAI.core.client.auth.auth_flow import (
    AuthDispatcher,
    AuthResult,
    resolve_login,
    resolve_signup,
    validate_signup,
)
from FitAI.core.client.auth.form_state import FormFields, MessageKind, ResultMessage
from FitAI.core.client.utils import SessionStoreError, ValidationError

from .conftest import service_error, transport_error


class FailingStore:
    async def set(self, token: str) -> None:
        raise SessionStoreError("disk full")

    async def get(self):
        return None


class TestResolveLogin:
    """Tests for mapping login replies."""

    def test_success_navigates_without_message(self):
        outcome = resolve_login(ApiResult.success({"token": "T1"}), "/profile")

        assert outcome.result is AuthResult.SUCCESS
        assert outcome.token == "T1"
        assert outcome.navigate_to == "/profile"
        assert outcome.message.is_empty
        assert not outcome.switch_to_login

    def test_service_error_text_is_shown_verbatim(self):
        outcome = resolve_login(service_error(401, "Invalid credentials"))

        assert outcome.result is AuthResult.REJECTED
        assert outcome.message == ResultMessage.error("Invalid credentials")
        assert outcome.token is None
        assert outcome.navigate_to is None

    def test_service_error_without_text_uses_login_default(self):
        outcome = resolve_login(service_error(401))

        assert outcome.message == ResultMessage.error("Invalid email or password")

    def test_transport_error(self):
        outcome = resolve_login(transport_error())

        assert outcome.result is AuthResult.NETWORK_ERROR
        assert outcome.message == ResultMessage.error("Login failed. Please try again.")


class TestResolveSignup:
    """Tests for mapping registration replies."""

    def test_success(self):
        outcome = resolve_signup(ApiResult.success({"token": "T2"}))

        assert outcome.succeeded
        assert outcome.token == "T2"
        assert outcome.message == ResultMessage.success("User successfully registered!")
        assert outcome.switch_to_login
        assert outcome.navigate_to is None

    def test_service_error_text(self):
        outcome = resolve_signup(service_error(409, "Email taken"))

        assert outcome.message == ResultMessage.error("Email taken")

    def test_service_error_without_text_uses_signup_default(self):
        outcome = resolve_signup(service_error(409))

        assert outcome.message == ResultMessage.error("User already registered")

    def test_transport_error(self):
        outcome = resolve_signup(transport_error())

        assert outcome.message == ResultMessage.error("Signup failed. Please try again.")


def test_validate_signup():
    validate_signup(FormFields(password="a", confirm_password="a"))

    with pytest.raises(ValidationError) as exc_info:
        validate_signup(FormFields(password="a", confirm_password="b"))
    assert exc_info.value.message == "Passwords do not match"


class TestAuthDispatcher:
    """Tests for AuthDispatcher against a fake identity service."""

    @pytest.mark.asyncio
    async def test_login_sends_email_and_password_only(self, dispatcher, fake_api, session_store):
        fields = FormFields(username="Jo", email="jo@example.com", password="pw", confirm_password="x")

        outcome = await dispatcher.login(fields)

        assert fake_api.calls == [("login", {"email": "jo@example.com", "password": "pw"})]
        assert outcome.succeeded
        assert await session_store.get() == "T1"

    @pytest.mark.asyncio
    async def test_login_does_not_navigate_by_itself(self, dispatcher, navigator):
        outcome = await dispatcher.login(FormFields(email="jo@example.com", password="pw"))

        assert navigator.visited == []
        dispatcher.navigate(outcome)
        assert navigator.visited == ["/profile"]

    @pytest.mark.asyncio
    async def test_custom_landing_path(self, fake_api, session_store, navigator):
        dispatcher = AuthDispatcher(fake_api, session_store, navigator, landing_path="/dashboard")

        outcome = await dispatcher.login(FormFields(email="jo@example.com", password="pw"))
        dispatcher.navigate(outcome)

        assert navigator.visited == ["/dashboard"]

    @pytest.mark.asyncio
    async def test_failed_login_leaves_store_untouched(self, dispatcher, fake_api, session_store):
        fake_api.login_result = service_error(401, "Invalid credentials")

        outcome = await dispatcher.login(FormFields(email="jo@example.com", password="pw"))

        assert outcome.result is AuthResult.REJECTED
        assert session_store.writes == 0

    @pytest.mark.asyncio
    async def test_register_sends_username_email_password(self, dispatcher, fake_api, session_store):
        fields = FormFields(username="Jo", email="jo@example.com", password="pw", confirm_password="pw")

        outcome = await dispatcher.register(fields)

        assert fake_api.calls == [
            ("register", {"username": "Jo", "email": "jo@example.com", "password": "pw"})
        ]
        assert outcome.message.kind is MessageKind.SUCCESS
        assert await session_store.get() == "T2"

    @pytest.mark.asyncio
    async def test_register_mismatch_never_calls_service(self, dispatcher, fake_api):
        outcome = await dispatcher.register(FormFields(password="a", confirm_password="b"))

        assert outcome.result is AuthResult.PASSWORD_MISMATCH
        assert outcome.message == ResultMessage.error("Passwords do not match")
        assert fake_api.calls == []

    @pytest.mark.asyncio
    async def test_store_failure_is_reported_as_generic_error(self, fake_api, navigator):
        dispatcher = AuthDispatcher(fake_api, FailingStore(), navigator)

        login = await dispatcher.login(FormFields(email="jo@example.com", password="pw"))
        signup = await dispatcher.register(FormFields(password="pw", confirm_password="pw"))

        assert login.result is AuthResult.STORAGE_ERROR
        assert login.message == ResultMessage.error("Login failed. Please try again.")
        assert login.navigate_to is None
        assert signup.message == ResultMessage.error("Signup failed. Please try again.")
        assert not signup.switch_to_login

    def test_outcome_repr_hides_token(self):
        outcome = resolve_login(ApiResult.success({"token": "secret-token"}))

        assert "secret-token" not in repr(outcome)
