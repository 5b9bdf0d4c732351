"""
Core components of the FitAI client: logging and the authentication form.
"""
