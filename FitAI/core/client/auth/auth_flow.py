"""
Authentication request dispatcher.
Turns a submitted form into one login or registration call and resolves the
reply into the message, token and follow-up action for the form.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional, TYPE_CHECKING

from FitAI.config import config
from FitAI.core.client.auth.form_state import FormFields, ResultMessage
from FitAI.core.client.utils import (
    LOGIN_FAILURE_TEXT,
    LOGIN_REJECTED_TEXT,
    PASSWORD_MISMATCH_TEXT,
    SIGNUP_FAILURE_TEXT,
    SIGNUP_REJECTED_TEXT,
    SIGNUP_SUCCESS_TEXT,
    ServiceError,
    SessionStoreError,
    ValidationError,
)
from FitAI.core.logging import get_logger

if TYPE_CHECKING:
    from FitAI.api.client import ApiResult, IdentityServiceClient
    from FitAI.core.client.services import Navigator, SessionStore

logger = get_logger(__name__)


class AuthResult(Enum):
    """Result of an authentication operation."""
    SUCCESS = auto()
    PASSWORD_MISMATCH = auto()
    REJECTED = auto()
    NETWORK_ERROR = auto()
    STORAGE_ERROR = auto()


@dataclass(frozen=True)
class AuthOutcome:
    """What the form should show and do after a submission."""
    result: AuthResult
    message: ResultMessage
    token: Optional[str] = None
    navigate_to: Optional[str] = None
    switch_to_login: bool = False

    @property
    def succeeded(self) -> bool:
        return self.result is AuthResult.SUCCESS

    def __repr__(self) -> str:
        return (
            f"AuthOutcome(result={self.result.name}, message={self.message!r}, "
            f"token={'***' if self.token else None}, navigate_to={self.navigate_to!r}, "
            f"switch_to_login={self.switch_to_login})"
        )


def validate_signup(fields: FormFields) -> None:
    """
    Raises:
        ValidationError: if the password and its confirmation differ
    """
    if fields.password != fields.confirm_password:
        raise ValidationError(PASSWORD_MISMATCH_TEXT)


def _failure(result: 'ApiResult', rejected_text: str, failure_text: str) -> AuthOutcome:
    error = result.error
    if isinstance(error, ServiceError):
        return AuthOutcome(
            AuthResult.REJECTED,
            ResultMessage.error(error.server_message or rejected_text),
        )
    return AuthOutcome(AuthResult.NETWORK_ERROR, ResultMessage.error(failure_text))


def resolve_login(result: 'ApiResult', landing_path: str = config.LANDING_PATH) -> AuthOutcome:
    """
    Map a login reply to an outcome.

    A successful login shows no message; leaving the page is the signal.
    """
    if result.ok:
        return AuthOutcome(
            AuthResult.SUCCESS,
            ResultMessage.none(),
            token=result.token,
            navigate_to=landing_path,
        )
    return _failure(result, LOGIN_REJECTED_TEXT, LOGIN_FAILURE_TEXT)


def resolve_signup(result: 'ApiResult') -> AuthOutcome:
    """
    Map a registration reply to an outcome.

    The new account is signed in straight away and the form later returns
    to the login tab.
    """
    if result.ok:
        return AuthOutcome(
            AuthResult.SUCCESS,
            ResultMessage.success(SIGNUP_SUCCESS_TEXT),
            token=result.token,
            switch_to_login=True,
        )
    return _failure(result, SIGNUP_REJECTED_TEXT, SIGNUP_FAILURE_TEXT)


class AuthDispatcher:
    """
    Sends login and registration requests and persists the resulting session.
    """

    def __init__(self, api_client: 'IdentityServiceClient', session_store: 'SessionStore',
                 navigator: 'Navigator', landing_path: str = config.LANDING_PATH):
        """
        Args:
            api_client: Client for the identity service
            session_store: Slot receiving the token on success
            navigator: Moves the user on after login
            landing_path: Destination of a successful login
        """
        self._api_client = api_client
        self._session_store = session_store
        self._navigator = navigator
        self._landing_path = landing_path

    async def login(self, fields: FormFields) -> AuthOutcome:
        """
        Authenticate with the email and password from ``fields``.

        Returns:
            AuthOutcome; on success the token has already been stored
        """
        result = await self._api_client.login(fields.email, fields.password)
        outcome = resolve_login(result, self._landing_path)
        return await self._persist(outcome, fields.email, LOGIN_FAILURE_TEXT)

    async def register(self, fields: FormFields) -> AuthOutcome:
        """
        Create an account from ``fields``.

        A password mismatch is reported without contacting the service.
        """
        try:
            validate_signup(fields)
        except ValidationError as e:
            return AuthOutcome(AuthResult.PASSWORD_MISMATCH, ResultMessage.error(e.message))

        result = await self._api_client.register(fields.username, fields.email, fields.password)
        outcome = resolve_signup(result)
        return await self._persist(outcome, fields.email, SIGNUP_FAILURE_TEXT)

    def navigate(self, outcome: AuthOutcome) -> None:
        """Follow the outcome's navigation target, if any."""
        if outcome.navigate_to:
            self._navigator.go_to(outcome.navigate_to)

    async def _persist(self, outcome: AuthOutcome, email: str, failure_text: str) -> AuthOutcome:
        if not outcome.token:
            logger.info("Authentication for %s ended with %s", email, outcome.result.name)
            return outcome

        try:
            await self._session_store.set(outcome.token)
        except SessionStoreError as e:
            logger.error("Could not store session for %s: %s", email, e)
            return AuthOutcome(AuthResult.STORAGE_ERROR, ResultMessage.error(failure_text))

        logger.info("Session established for %s", email)
        return outcome


__all__ = [
    'AuthResult',
    'AuthOutcome',
    'AuthDispatcher',
    'resolve_login',
    'resolve_signup',
    'validate_signup',
]
