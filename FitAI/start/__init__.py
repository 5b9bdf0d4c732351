"""
Startup entry points for the FitAI client.
"""
