"""Tests for the Behave Pro API client."""

import base64
from unittest.mock import patch

import pytest
import requests
import responses

from behavepro.api.behave_client import BehaveProClient, build_features_url, basic_auth_header
from behavepro.api.errors import (
    Unauthorized,
    ServerError,
    UnexpectedStatus,
    TransportError,
    BehaveProAPIError
)
from behavepro.config import Settings

FEATURES_URL = "https://behave.pro/rest/cucumber/1.0/project/42/features?manual=false"


@pytest.fixture
def settings():
    return Settings(project_id="42", user_id="jira-user", api_key="s3cret")


@pytest.fixture
def client():
    with BehaveProClient() as c:
        yield c


def test_build_features_url():
    """Test URL construction for the default host."""
    assert build_features_url("https://behave.pro", "42", False) == FEATURES_URL


def test_build_features_url_manual():
    """Test URL construction with manual scenarios."""
    url = build_features_url("https://h", "P1", True)
    assert url == "https://h/rest/cucumber/1.0/project/P1/features?manual=true"


def test_basic_auth_header():
    """Test the Authorization header value."""
    expected = base64.b64encode(b"jira-user:s3cret").decode()
    assert basic_auth_header("jira-user", "s3cret") == f"Basic {expected}"


@responses.activate
def test_fetch_features_success(client, settings):
    """Test that a 200 response returns the body unchanged."""
    body = b"PK\x03\x04 archive bytes"
    responses.add(responses.GET, FEATURES_URL, body=body, status=200,
                  content_type="application/zip")

    assert client.fetch_features(settings) == body

    assert len(responses.calls) == 1
    request = responses.calls[0].request
    assert request.url == FEATURES_URL
    assert request.headers['Authorization'] == basic_auth_header("jira-user", "s3cret")


@responses.activate
def test_fetch_features_unauthorized(client, settings):
    """Test that 401 raises Unauthorized."""
    responses.add(responses.GET, FEATURES_URL, status=401)

    with pytest.raises(Unauthorized) as exc_info:
        client.fetch_features(settings)
    assert exc_info.value.status_code == 401
    assert "ensure userId and apiKey are both valid" in str(exc_info.value)


@responses.activate
def test_fetch_features_server_error(client, settings):
    """Test that 500 raises ServerError."""
    responses.add(responses.GET, FEATURES_URL, status=500)

    with pytest.raises(ServerError) as exc_info:
        client.fetch_features(settings)
    assert "check your host url" in str(exc_info.value)


@pytest.mark.parametrize("status", [404, 403, 502, 204])
@responses.activate
def test_fetch_features_unexpected_status(client, settings, status):
    """Test that any other status raises UnexpectedStatus."""
    responses.add(responses.GET, FEATURES_URL, status=status)

    with pytest.raises(UnexpectedStatus) as exc_info:
        client.fetch_features(settings)
    assert exc_info.value.status_code == status
    assert str(exc_info.value) == f"{status} http error when downloading"


@responses.activate
def test_fetch_features_transport_error(client, settings):
    """Test that connection failures raise TransportError without retrying."""
    responses.add(responses.GET, FEATURES_URL,
                  body=requests.exceptions.ConnectionError("connection refused"))

    with pytest.raises(TransportError) as exc_info:
        client.fetch_features(settings)
    assert isinstance(exc_info.value, BehaveProAPIError)
    assert exc_info.value.status_code is None


def test_fetch_features_passes_timeout(settings):
    """Test that the configured timeout reaches the request."""
    session = requests.Session()
    response = requests.Response()
    response.status_code = 200
    response._content = b"zip"

    with patch.object(session, 'get', return_value=response) as mock_get:
        client = BehaveProClient(session=session)
        client.fetch_features(Settings(project_id="42", user_id="u", api_key="k", timeout=3.0))
        client.fetch_features(settings)

    assert mock_get.call_args_list[0].kwargs['timeout'] == 3.0
    assert mock_get.call_args_list[1].kwargs['timeout'] is None
