"""
Behave Pro client.

Downloads the Cucumber feature files of JIRA projects from a Behave Pro
server and installs them on local disk.
"""

__version__ = "0.1.0"

from .config import Settings, resolve_settings
from .pipeline import ProjectResult, fetch_features, fetch_features_from_config, fetch_all, run

__all__ = [
    'Settings',
    'resolve_settings',
    'ProjectResult',
    'fetch_features',
    'fetch_features_from_config',
    'fetch_all',
    'run'
]
