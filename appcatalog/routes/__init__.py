"""
API routes for the app catalog
"""

from . import apps, auth, config, pages, proxy

__all__ = ["apps", "auth", "config", "pages", "proxy"]
