"""
Behave Pro API client.

This module downloads the feature archive of a JIRA project from the
Behave Pro cucumber endpoint. It does not retry: every request is made
exactly once and any failure is raised to the caller.
"""

import base64
import logging
import requests
from typing import Optional, TYPE_CHECKING

from .errors import Unauthorized, ServerError, UnexpectedStatus, TransportError

if TYPE_CHECKING:
    from ..config import Settings

logger = logging.getLogger(__name__)

FEATURES_ENDPOINT = "/rest/cucumber/1.0/project/"
FEATURES_QUERY = "/features?manual="
USER_AGENT = "behavepro-python-client"


def build_features_url(host: str, project_id: str, manual: bool) -> str:
    """
    Build the download URL for a project's features.

    Args:
        host: Base URL of the Behave Pro server
        project_id: JIRA project id
        manual: Whether scenarios marked as manual are included

    Returns:
        Full URL, e.g. https://behave.pro/rest/cucumber/1.0/project/42/features?manual=false
    """
    return "".join([
        host,
        FEATURES_ENDPOINT,
        str(project_id),
        FEATURES_QUERY,
        "true" if manual else "false",
    ])


def basic_auth_header(user_id: str, api_key: str) -> str:
    """Return the value of a Basic Authorization header."""
    token = base64.b64encode(f"{user_id}:{api_key}".encode('utf-8')).decode('ascii')
    return f"Basic {token}"


class BehaveProClient:
    """Client for the Behave Pro feature download endpoint."""

    def __init__(self, session: Optional[requests.Session] = None):
        """
        Initialize the client.

        Args:
            session: Optional session to send requests with; a new one is
                created when omitted
        """
        self.session = session or self._create_session()

    def _create_session(self) -> requests.Session:
        """Create a session for HTTP requests."""
        session = requests.Session()
        session.headers.update({'User-Agent': USER_AGENT})
        return session

    def fetch_features(self, settings: 'Settings') -> bytes:
        """
        Download the feature archive for one project.

        Args:
            settings: Validated settings of the project

        Returns:
            Raw archive bytes as sent by the server

        Raises:
            Unauthorized: On HTTP 401
            ServerError: On HTTP 500
            UnexpectedStatus: On any other non-200 status
            TransportError: If no response was received
        """
        url = build_features_url(settings.host, settings.project_id, settings.manual)
        headers = {'Authorization': basic_auth_header(settings.user_id, settings.api_key)}

        logger.info(f"Downloading features from JIRA project {settings.project_id}...")
        try:
            response = self.session.get(url, headers=headers, timeout=settings.timeout)
        except requests.exceptions.RequestException as e:
            logger.error(f"Request for project {settings.project_id} failed: {e}")
            raise TransportError(url, str(e)) from e

        status = response.status_code
        if status == 200:
            logger.debug(f"Received {len(response.content)} bytes for project {settings.project_id}")
            return response.content
        if status == 401:
            raise Unauthorized()
        if status == 500:
            raise ServerError()
        raise UnexpectedStatus(status)

    def close(self) -> None:
        """Close the underlying session."""
        self.session.close()

    def __enter__(self) -> 'BehaveProClient':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
