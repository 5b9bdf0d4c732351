"""
Form state controller for the login/signup form.

Front ends forward field edits, tab selection and submit events here and
re-render from ``controller.state`` whenever a subscribed listener fires.
"""

from dataclasses import dataclass
from typing import Awaitable, Callable, List, Optional, Union

from FitAI.config import config
from FitAI.core.client.auth.auth_flow import (
    AuthDispatcher,
    AuthOutcome,
    AuthResult,
    validate_signup,
)
from FitAI.core.client.auth.form_state import (
    FieldChanged,
    FormEvent,
    FormFields,
    FormMode,
    FormState,
    ModeSelected,
    ModeSwitched,
    ResultMessage,
    SubmitCompleted,
    SubmitRejected,
    SubmitStarted,
    update,
)
from FitAI.core.client.services import ScheduledTask, Scheduler
from FitAI.core.client.utils import LOGIN_FAILURE_TEXT, SIGNUP_FAILURE_TEXT, ValidationError
from FitAI.core.logging import get_logger

logger = get_logger(__name__)

StateListener = Callable[[FormState], None]


@dataclass
class SubmitEvent:
    """Form submission raised by a front end."""
    default_prevented: bool = False

    def prevent_default(self) -> None:
        self.default_prevented = True


class AuthFormController:
    """Single source of truth for the form's mode, fields, status and message."""

    def __init__(self, dispatcher: AuthDispatcher, scheduler: Optional[Scheduler] = None,
                 query=None, switch_delay: float = config.SIGNUP_SWITCH_DELAY):
        """
        Args:
            dispatcher: Sends the requests and stores the session
            scheduler: Runs the delayed return to the login tab
            query: Page query used once to pick the starting tab
            switch_delay: Seconds between a registration and the tab switch
        """
        self._dispatcher = dispatcher
        self._scheduler = scheduler or Scheduler()
        self._switch_delay = switch_delay
        self._state = FormState.initial(query)
        self._listeners: List[StateListener] = []
        self._pending_switch: Optional[ScheduledTask] = None
        self._disposed = False

    @property
    def state(self) -> FormState:
        return self._state

    @property
    def mode(self) -> FormMode:
        return self._state.mode

    @property
    def fields(self) -> FormFields:
        return self._state.fields

    @property
    def message(self) -> ResultMessage:
        return self._state.message

    @property
    def is_pending(self) -> bool:
        return self._state.is_pending

    @property
    def pending_switch(self) -> Optional[ScheduledTask]:
        return self._pending_switch

    @property
    def disposed(self) -> bool:
        return self._disposed

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """
        Call ``listener`` with the new state after every change.

        Returns:
            Function removing the listener again
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def set_field(self, key: str, value: str) -> None:
        """
        Store one field value. Validation happens on submit.

        Raises:
            FormFieldError: if ``key`` is not a form field
        """
        if self._disposed:
            return
        self._dispatch(FieldChanged(key, value))

    def set_mode(self, mode: Union[FormMode, str]) -> None:
        """Switch tabs, keeping typed values and clearing the message."""
        if self._disposed:
            return
        self._dispatch(ModeSelected(FormMode(mode)))

    async def submit_login(self, event: Optional[SubmitEvent] = None) -> Optional[AuthOutcome]:
        """
        Log in with the current email and password.

        Returns:
            The outcome, or None when the submit was ignored
        """
        if not self._accept_submit(event, "login"):
            return None

        outcome = await self._send(self._dispatcher.login, LOGIN_FAILURE_TEXT)
        if outcome.succeeded:
            self._dispatcher.navigate(outcome)
        return outcome

    async def submit_signup(self, event: Optional[SubmitEvent] = None) -> Optional[AuthOutcome]:
        """
        Register with the current fields.

        Mismatched passwords are reported without contacting the service.
        On success the form returns to the login tab after a short delay.

        Returns:
            The outcome, or None when the submit was ignored
        """
        if not self._accept_submit(event, "signup"):
            return None

        try:
            validate_signup(self._state.fields)
        except ValidationError as e:
            logger.info("Signup rejected locally: %s", e.message)
            self._dispatch(SubmitRejected(e.message))
            return AuthOutcome(AuthResult.PASSWORD_MISMATCH, self._state.message)

        outcome = await self._send(self._dispatcher.register, SIGNUP_FAILURE_TEXT)
        if outcome.switch_to_login:
            self._schedule_switch()
        return outcome

    def dispose(self) -> None:
        """Tear down: cancel the pending tab switch and drop listeners."""
        if self._disposed:
            return
        self._disposed = True
        if self._pending_switch is not None:
            self._pending_switch.cancel()
            self._pending_switch = None
        self._listeners.clear()

    def _accept_submit(self, event: Optional[SubmitEvent], action: str) -> bool:
        if event is not None:
            event.prevent_default()
        if self._disposed:
            logger.debug("Ignoring %s submit on a disposed form", action)
            return False
        if self._state.is_pending:
            logger.warning("Ignoring %s submit: a request is already in flight", action)
            return False
        return True

    async def _send(self, send: Callable[[FormFields], Awaitable[AuthOutcome]],
                    failure_text: str) -> AuthOutcome:
        fields = self._state.fields
        self._dispatch(SubmitStarted())
        request_id = self._state.request_id

        outcome = AuthOutcome(AuthResult.NETWORK_ERROR, ResultMessage.error(failure_text))
        try:
            outcome = await send(fields)
        except Exception:
            logger.exception("Unexpected error while submitting the form")
        finally:
            # Status must leave PENDING on every path, cancellation included
            self._dispatch(SubmitCompleted(request_id, outcome.message))
        return outcome

    def _schedule_switch(self) -> None:
        if self._disposed:
            return
        if self._pending_switch is not None:
            self._pending_switch.cancel()
        self._pending_switch = self._scheduler.call_later(self._switch_delay, self._switch_to_login)

    def _switch_to_login(self) -> None:
        self._pending_switch = None
        if self._disposed:
            return
        self._dispatch(ModeSwitched(FormMode.LOGIN))

    def _dispatch(self, event: FormEvent) -> None:
        new_state = update(self._state, event)
        if new_state == self._state:
            return
        self._state = new_state
        for listener in list(self._listeners):
            listener(new_state)


__all__ = ['AuthFormController', 'SubmitEvent', 'StateListener']
