r"""
    _______ __  ___    ____
   / ____(_) /_/   |  /  _/
  / /_  / / __/ /| |  / /
 / __/ / / /_/ ___ |_/ /
/_/   /_/\__/_/  |_/___/

FitAI Client - credential entry and session bootstrap for the FitAI service.

Handles login and registration against the FitAI identity service and hands
the resulting session token to a persistent store.
"""

__version__ = "1.0.0"
