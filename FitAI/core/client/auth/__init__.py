"""
Authentication module for the FitAI client.
Handles the login/signup form state, request dispatch and session hand-off.
"""

from .auth_flow import AuthDispatcher, AuthOutcome, AuthResult
from .controller import AuthFormController, SubmitEvent
from .form_state import FormFields, FormMode, FormState, MessageKind, RequestStatus, ResultMessage

__all__ = [
    'AuthDispatcher',
    'AuthOutcome',
    'AuthResult',
    'AuthFormController',
    'SubmitEvent',
    'FormFields',
    'FormMode',
    'FormState',
    'MessageKind',
    'RequestStatus',
    'ResultMessage',
]
