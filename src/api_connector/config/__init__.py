"""
Configuration for API connectors.
"""

from .settings import ApiSettings, load_settings

__all__ = ["ApiSettings", "load_settings"]
