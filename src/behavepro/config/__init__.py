"""
Configuration package for the Behave Pro client.

This package provides the Settings record shared by every pipeline stage
and the helpers that resolve it from defaults, environment variables and
the JSON project configuration file.
"""

from .settings import (
    Settings,
    DEFAULT_HOST,
    DEFAULT_OUTPUT,
    DEFAULT_CONFIG,
    validate_settings,
    load_config_records,
    resolve_settings,
    settings_from_config
)

__all__ = [
    'Settings',
    'DEFAULT_HOST',
    'DEFAULT_OUTPUT',
    'DEFAULT_CONFIG',
    'validate_settings',
    'load_config_records',
    'resolve_settings',
    'settings_from_config'
]
