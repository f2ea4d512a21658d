"""
Module de configuration du Query Service
"""

from .settings import QueryServiceSettings, get_settings

__all__ = ["QueryServiceSettings", "get_settings"]
