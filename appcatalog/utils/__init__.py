"""
Utilities for the app catalog: database, sessions, health proxy client
"""
