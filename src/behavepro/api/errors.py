"""
Error classes for the feature retrieval pipeline.

Every failure of a project's pipeline is raised as a subclass of
BehaveProError. Each class carries a short ``kind`` identifier so callers
can branch on the failure without matching on message text.
"""

from pathlib import Path
from typing import Optional, Union

PathLike = Union[str, Path]


class BehaveProError(Exception):
    """Base class for all pipeline errors."""

    kind = "BehaveProError"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigError(BehaveProError):
    """Error reading the project configuration file."""

    kind = "ConfigError"

    def __init__(self, message: str, path: PathLike):
        super().__init__(message)
        self.path = Path(path)


class ConfigNotFound(ConfigError):
    """Configuration file does not exist or cannot be read."""

    kind = "ConfigNotFound"

    def __init__(self, path: PathLike):
        super().__init__(f"Could not find config at {path}", path)


class ConfigInvalid(ConfigError):
    """Configuration file is not a JSON array of objects."""

    kind = "ConfigInvalid"

    def __init__(self, path: PathLike, reason: str):
        super().__init__(f"Invalid config at {path}: {reason}", path)
        self.reason = reason


class MissingField(BehaveProError):
    """A required setting is missing."""

    kind = "MissingField"

    def __init__(self, field: str):
        super().__init__(f"{field} is missing")
        self.field = field


class BehaveProAPIError(BehaveProError):
    """Error in a Behave Pro API request."""

    kind = "BehaveProAPIError"

    def __init__(self, message: str, status_code: Optional[int] = None):
        """
        Initialize API error.

        Args:
            message: Error message
            status_code: HTTP status code, None for transport failures
        """
        super().__init__(message)
        self.status_code = status_code


class Unauthorized(BehaveProAPIError):
    """Server rejected the credentials."""

    kind = "Unauthorized"

    def __init__(self):
        super().__init__("Unauthorized: ensure userId and apiKey are both valid", 401)


class ServerError(BehaveProAPIError):
    """Server failed to handle the request."""

    kind = "ServerError"

    def __init__(self):
        super().__init__("Server error: check your host url", 500)


class UnexpectedStatus(BehaveProAPIError):
    """Any status other than 200, 401 or 500."""

    kind = "UnexpectedStatus"

    def __init__(self, status_code: int):
        super().__init__(f"{status_code} http error when downloading", status_code)


class TransportError(BehaveProAPIError):
    """Request never produced an HTTP response."""

    kind = "TransportError"

    def __init__(self, url: str, reason: str):
        super().__init__(f"Request to {url} failed: {reason}")
        self.url = url


class ArchiveError(BehaveProError):
    """Error installing a downloaded archive."""

    kind = "ArchiveError"

    def __init__(self, message: str, path: PathLike):
        super().__init__(message)
        self.path = Path(path)


class DirectoryCreateFailed(ArchiveError):
    """Project directory could not be created."""

    kind = "DirectoryCreateFailed"

    def __init__(self, path: PathLike, reason: str):
        super().__init__(f"Could not create directory {path}: {reason}", path)


class ArchiveWriteFailed(ArchiveError):
    """Temporary zip could not be written."""

    kind = "ArchiveWriteFailed"

    def __init__(self, path: PathLike, reason: str):
        super().__init__(f"Could not write archive {path}: {reason}", path)


class ExtractionFailed(ArchiveError):
    """Zip could not be extracted into the project directory."""

    kind = "ExtractionFailed"

    def __init__(self, path: PathLike, reason: str):
        super().__init__(f"Could not extract archive {path}: {reason}", path)


class CleanupFailed(ArchiveError):
    """Temporary zip could not be removed after extraction."""

    kind = "CleanupFailed"

    def __init__(self, path: PathLike, reason: str):
        super().__init__(f"Could not remove archive {path}: {reason}", path)
