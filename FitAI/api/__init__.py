"""
Clients for remote FitAI services.
"""

from .client import ApiResult, IdentityServiceClient, close_session

__all__ = ['ApiResult', 'IdentityServiceClient', 'close_session']
