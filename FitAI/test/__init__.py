"""
Test-suite for the FitAI client.
"""
