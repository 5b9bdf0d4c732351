"""
State model for the login/signup form.

The form state is an immutable value; every change goes through
``update(state, event)`` which returns the next state. Nothing in this
module performs I/O, so transitions can be tested without a front end.
"""

from dataclasses import dataclass, field, replace
from enum import Enum, auto
from typing import Mapping, Union
from urllib.parse import parse_qs

from FitAI.core.client.utils import (
    FIELD_ALIASES,
    FIELD_NAMES,
    SIGNUP_QUERY_PARAM,
    FormFieldError,
)


class FormMode(Enum):
    """Which tab of the form is active."""
    LOGIN = "login"
    SIGNUP = "signup"

    @classmethod
    def from_query(cls, query: Union[str, Mapping[str, str], None]) -> 'FormMode':
        """
        Pick the initial mode from the page query.

        Args:
            query: Raw query string (``"signup=true"``, ``"?signup=true"``) or
                a mapping of parameter names to values

        Returns:
            SIGNUP when ``signup`` is exactly ``"true"``, LOGIN otherwise
        """
        if not query:
            return cls.LOGIN

        if isinstance(query, str):
            values = parse_qs(query.lstrip("?")).get(SIGNUP_QUERY_PARAM, [])
            value = values[0] if values else None
        else:
            value = query.get(SIGNUP_QUERY_PARAM)

        return cls.SIGNUP if value == "true" else cls.LOGIN


class RequestStatus(Enum):
    """Whether a submission is in flight."""
    IDLE = auto()
    PENDING = auto()


class MessageKind(Enum):
    """Kind of feedback shown above the form."""
    NONE = auto()
    SUCCESS = auto()
    ERROR = auto()


@dataclass(frozen=True)
class ResultMessage:
    """Feedback shown to the user after a submission."""
    kind: MessageKind = MessageKind.NONE
    text: str = ""

    @classmethod
    def none(cls) -> 'ResultMessage':
        return cls()

    @classmethod
    def success(cls, text: str) -> 'ResultMessage':
        return cls(MessageKind.SUCCESS, text)

    @classmethod
    def error(cls, text: str) -> 'ResultMessage':
        return cls(MessageKind.ERROR, text)

    @property
    def is_empty(self) -> bool:
        return self.kind is MessageKind.NONE


def normalize_field(key: str) -> str:
    """
    Map a field key (or a front-end element id) to its canonical name.

    Raises:
        FormFieldError: if the key is not one of the form's fields
    """
    name = FIELD_ALIASES.get(key, key)
    if name not in FIELD_NAMES:
        raise FormFieldError(f"Unknown form field: {key!r}", {"allowed": list(FIELD_NAMES)})
    return name


@dataclass(frozen=True)
class FormFields:
    """Values typed into the form. All fields exist in both modes."""
    username: str = ""
    email: str = ""
    password: str = ""
    confirm_password: str = ""

    def __getitem__(self, key: str) -> str:
        return getattr(self, normalize_field(key))

    def with_value(self, key: str, value: str) -> 'FormFields':
        """Return a copy with a single field changed."""
        return replace(self, **{normalize_field(key): value})

    def login_payload(self) -> dict:
        return {"email": self.email, "password": self.password}

    def register_payload(self) -> dict:
        return {"username": self.username, "email": self.email, "password": self.password}

    def __repr__(self) -> str:
        # Keep secrets out of logs and tracebacks
        return (
            f"FormFields(username={self.username!r}, email={self.email!r}, "
            f"password='***', confirm_password='***')"
        )


@dataclass(frozen=True)
class FormState:
    """Complete state of the authentication form."""
    mode: FormMode = FormMode.LOGIN
    fields: FormFields = field(default_factory=FormFields)
    status: RequestStatus = RequestStatus.IDLE
    message: ResultMessage = field(default_factory=ResultMessage)
    request_id: int = 0

    @property
    def is_pending(self) -> bool:
        return self.status is RequestStatus.PENDING

    @classmethod
    def initial(cls, query: Union[str, Mapping[str, str], None] = None) -> 'FormState':
        """Build the starting state for a page opened with ``query``."""
        return cls(mode=FormMode.from_query(query))


# ----- events -----

@dataclass(frozen=True)
class FieldChanged:
    """The user edited a field."""
    key: str
    value: str


@dataclass(frozen=True)
class ModeSelected:
    """The user picked a tab."""
    mode: FormMode


@dataclass(frozen=True)
class ModeSwitched:
    """The form switched tabs on its own; the current message stays visible."""
    mode: FormMode


@dataclass(frozen=True)
class SubmitStarted:
    """A request is about to be sent."""
    pass


@dataclass(frozen=True)
class SubmitRejected:
    """The submission failed client-side validation."""
    text: str


@dataclass(frozen=True)
class SubmitCompleted:
    """The request for ``request_id`` finished with ``message``."""
    request_id: int
    message: ResultMessage


FormEvent = Union[FieldChanged, ModeSelected, ModeSwitched, SubmitStarted, SubmitRejected, SubmitCompleted]


def update(state: FormState, event: FormEvent) -> FormState:
    """
    Apply ``event`` to ``state`` and return the resulting state.

    Rules:
        - a submit started while another is pending is ignored
        - a completion is applied once, and only for the latest request
        - selecting a tab clears the message but keeps field values

    Raises:
        FormFieldError: for a FieldChanged with an unknown key
        TypeError: for an unrecognised event
    """
    if isinstance(event, FieldChanged):
        return replace(state, fields=state.fields.with_value(event.key, event.value))

    if isinstance(event, ModeSelected):
        return replace(state, mode=event.mode, message=ResultMessage.none())

    if isinstance(event, ModeSwitched):
        return replace(state, mode=event.mode)

    if isinstance(event, SubmitStarted):
        if state.is_pending:
            return state
        return replace(
            state,
            status=RequestStatus.PENDING,
            message=ResultMessage.none(),
            request_id=state.request_id + 1,
        )

    if isinstance(event, SubmitRejected):
        return replace(state, status=RequestStatus.IDLE, message=ResultMessage.error(event.text))

    if isinstance(event, SubmitCompleted):
        if event.request_id != state.request_id or not state.is_pending:
            return state
        return replace(state, status=RequestStatus.IDLE, message=event.message)

    raise TypeError(f"Unsupported form event: {event!r}")


__all__ = [
    'FormMode',
    'RequestStatus',
    'MessageKind',
    'ResultMessage',
    'FormFields',
    'FormState',
    'FieldChanged',
    'ModeSelected',
    'ModeSwitched',
    'SubmitStarted',
    'SubmitRejected',
    'SubmitCompleted',
    'FormEvent',
    'normalize_field',
    'update',
]
