"""Test configuration and fixtures."""

import io
import os
import zipfile
import pytest


@pytest.fixture(autouse=True)
def setup_test_env():
    """Remove Behave Pro settings from the environment."""
    # Save original environment
    original_env = dict(os.environ)

    for key in list(os.environ):
        if key.startswith('BEHAVEPRO_'):
            del os.environ[key]

    yield

    # Restore original environment
    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture
def make_archive():
    """Build zip bytes from a mapping of member name to content."""
    def _make(members):
        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, 'w') as zf:
            for name, content in members.items():
                zf.writestr(name, content)
        return buffer.getvalue()
    return _make


@pytest.fixture
def feature_archive(make_archive):
    """Archive with two feature files."""
    return make_archive({
        'login.feature': 'Feature: Login\n  Scenario: Valid user\n',
        'logout.feature': 'Feature: Logout\n  Scenario: Signed in user\n',
    })
