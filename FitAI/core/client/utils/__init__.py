"""
Shared constants and exceptions for the FitAI client.
"""

from .constants import (
    FIELD_ALIASES,
    FIELD_NAMES,
    LOGIN_FAILURE_TEXT,
    LOGIN_REJECTED_TEXT,
    PASSWORD_MISMATCH_TEXT,
    SIGNUP_FAILURE_TEXT,
    SIGNUP_QUERY_PARAM,
    SIGNUP_REJECTED_TEXT,
    SIGNUP_SUCCESS_TEXT,
)
from .exceptions import (
    ClientError,
    FormFieldError,
    ServiceError,
    SessionStoreError,
    TransportError,
    ValidationError,
)

__all__ = [
    'ClientError',
    'FormFieldError',
    'ServiceError',
    'SessionStoreError',
    'TransportError',
    'ValidationError',
    'FIELD_ALIASES',
    'FIELD_NAMES',
    'LOGIN_FAILURE_TEXT',
    'LOGIN_REJECTED_TEXT',
    'PASSWORD_MISMATCH_TEXT',
    'SIGNUP_FAILURE_TEXT',
    'SIGNUP_QUERY_PARAM',
    'SIGNUP_REJECTED_TEXT',
    'SIGNUP_SUCCESS_TEXT',
]
