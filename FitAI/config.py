"""
Configuration module for FitAI client.
Resolves endpoint and session settings from the environment once at import.
"""

import os
from typing import Dict, Any


class Config:
    """Application configuration class."""

    # Identity service
    API_BASE_URL = os.environ.get("FITAI_API_URL", "http://localhost:5000").rstrip("/")
    LOGIN_PATH = "/api/auth/login"
    REGISTER_PATH = "/api/auth/register"

    # Origin of the client pages reached after sign-in
    APP_URL = os.environ.get("FITAI_APP_URL", "").rstrip("/")

    # HTTP client defaults (seconds)
    REQUEST_TIMEOUT = float(os.environ.get("FITAI_REQUEST_TIMEOUT", "60"))
    CONNECT_TIMEOUT = 10.0

    # Post-auth behaviour
    LANDING_PATH = "/profile"
    SIGNUP_SWITCH_DELAY = 2.0

    # Session token slot
    SESSION_FILE = os.environ.get("FITAI_SESSION_FILE", "session.json")

    # Runtime environment (selects logging profile)
    ENV = os.environ.get("FITAI_ENV", "development").lower()

    @classmethod
    def get_config(cls) -> Dict[str, Any]:
        """Get all configuration values as a dictionary."""
        return {
            "API_BASE_URL": cls.API_BASE_URL,
            "LOGIN_PATH": cls.LOGIN_PATH,
            "REGISTER_PATH": cls.REGISTER_PATH,
            "APP_URL": cls.APP_URL,
            "REQUEST_TIMEOUT": cls.REQUEST_TIMEOUT,
            "CONNECT_TIMEOUT": cls.CONNECT_TIMEOUT,
            "LANDING_PATH": cls.LANDING_PATH,
            "SIGNUP_SWITCH_DELAY": cls.SIGNUP_SWITCH_DELAY,
            "SESSION_FILE": cls.SESSION_FILE,
            "ENV": cls.ENV,
        }


# Create config instance
config = Config()
