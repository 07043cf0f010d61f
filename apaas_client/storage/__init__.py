"""
Storage Layer.

This package handles persisted client settings.
"""

from .config_manager import ConfigManager

__all__ = ["ConfigManager"]
