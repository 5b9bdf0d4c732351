"""
Constants for the FitAI authentication form.
"""

# Form fields, in display order
FIELD_NAMES = ("username", "email", "password", "confirm_password")

# Input element ids forwarded by web-style front ends
FIELD_ALIASES = {
    "confirmPassword": "confirm_password",
}

# Query parameter selecting the initial tab
SIGNUP_QUERY_PARAM = "signup"

# User-visible texts
PASSWORD_MISMATCH_TEXT = "Passwords do not match"
SIGNUP_SUCCESS_TEXT = "User successfully registered!"
LOGIN_FAILURE_TEXT = "Login failed. Please try again."
SIGNUP_FAILURE_TEXT = "Signup failed. Please try again."
LOGIN_REJECTED_TEXT = "Invalid email or password"
SIGNUP_REJECTED_TEXT = "User already registered"
