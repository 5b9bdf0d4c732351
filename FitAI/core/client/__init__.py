"""
Client-side components of FitAI: the authentication form and its services.
"""
