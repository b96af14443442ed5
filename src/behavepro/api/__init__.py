"""
API package for the Behave Pro client.

This package provides:

1. The client that downloads a project's feature archive
2. The error hierarchy raised by every stage of the pipeline
"""

from .errors import (
    BehaveProError,
    ConfigError,
    ConfigNotFound,
    ConfigInvalid,
    MissingField,
    BehaveProAPIError,
    Unauthorized,
    ServerError,
    UnexpectedStatus,
    TransportError,
    ArchiveError,
    DirectoryCreateFailed,
    ArchiveWriteFailed,
    ExtractionFailed,
    CleanupFailed
)
from .behave_client import BehaveProClient, build_features_url, basic_auth_header

__all__ = [
    'BehaveProError',
    'ConfigError',
    'ConfigNotFound',
    'ConfigInvalid',
    'MissingField',
    'BehaveProAPIError',
    'Unauthorized',
    'ServerError',
    'UnexpectedStatus',
    'TransportError',
    'ArchiveError',
    'DirectoryCreateFailed',
    'ArchiveWriteFailed',
    'ExtractionFailed',
    'CleanupFailed',
    'BehaveProClient',
    'build_features_url',
    'basic_auth_header'
]
