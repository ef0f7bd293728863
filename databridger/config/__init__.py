"""
Configuration module for DataBridger.

Provides JSON-file connection settings with Pydantic validation.
"""

from .schema import REQUIRED_KEYS, ConnectionConfig
from .store import ConfigStore, get_config_path

__all__ = ["ConfigStore", "ConnectionConfig", "REQUIRED_KEYS", "get_config_path"]
