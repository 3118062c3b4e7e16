"""
Data models for the app catalog
"""

from .app import App, AppPayload, LoginRequest

__all__ = [
    "App",
    "AppPayload",
    "LoginRequest",
]
