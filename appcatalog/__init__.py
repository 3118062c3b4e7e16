"""
App Catalog
Administrative catalog of monitored applications with a health-check proxy
"""

__version__ = "1.0.0"
