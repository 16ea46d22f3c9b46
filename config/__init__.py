"""
Configuration Module

This module provides centralized configuration management for arango_ops:
- Connection configuration (endpoint, credentials, timeouts, transport retries)
- Document operation defaults
- Logging level
- Loading from environment variables and YAML files

Implemented with pydantic-settings for validation and environment overrides.
"""

from .settings import (
    ArangoSettings,
    ConnectionSettings,
    DocumentSettings,
    MonitoringSettings,
    load_settings
)

__all__ = [
    'ArangoSettings',
    'ConnectionSettings',
    'DocumentSettings',
    'MonitoringSettings',
    'load_settings'
]
