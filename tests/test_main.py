"""Tests for the command line entry point."""

import json

import pytest
import responses

from behavepro.main import build_parser, settings_from_args, main

FEATURES_URL = "https://behave.pro/rest/cucumber/1.0/project/P1/features?manual=false"


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    return tmp_path


def test_aliases():
    """Test the alternative option names."""
    args = build_parser().parse_args([
        "--project", "P1", "--user", "u", "--password", "k",
        "--directory", "out", "-m", "--timeout", "30"
    ])
    settings = settings_from_args(args)
    assert settings.project_id == "P1"
    assert settings.user_id == "u"
    assert settings.api_key == "k"
    assert settings.output == "out"
    assert settings.manual is True
    assert settings.timeout == 30.0


def test_defaults_without_flags():
    """Test that unset flags fall back to defaults."""
    settings = settings_from_args(build_parser().parse_args([]))
    assert settings.host == "https://behave.pro"
    assert settings.output == "features"
    assert settings.manual is False
    assert settings.config == "config.json"


def test_flags_override_environment(monkeypatch):
    """Test precedence of command line over environment."""
    monkeypatch.setenv("BEHAVEPRO_PROJECT_ID", "from-env")
    monkeypatch.setenv("BEHAVEPRO_USER_ID", "env-user")

    settings = settings_from_args(build_parser().parse_args(["--id", "from-cli"]))

    assert settings.project_id == "from-cli"
    assert settings.user_id == "env-user"


@responses.activate
def test_main_success(workdir, feature_archive, capsys):
    """Test a successful run prints the summary and exits 0."""
    responses.add(responses.GET, FEATURES_URL, body=feature_archive, status=200)

    exit_code = main(["--id", "P1", "--userId", "u", "--apiKey", "k"])

    assert exit_code == 0
    assert "Saved 2 features to" in capsys.readouterr().out


@responses.activate
def test_main_http_error(workdir, capsys):
    """Test that failures print the message and exit 1."""
    responses.add(responses.GET, FEATURES_URL, status=401)

    exit_code = main(["--id", "P1", "--userId", "u", "--apiKey", "k"])

    assert exit_code == 1
    assert "Unauthorized" in capsys.readouterr().err


def test_main_missing_config(workdir, capsys):
    """Test that config mode without a config file fails."""
    exit_code = main([])

    assert exit_code == 1
    assert "Could not find config at" in capsys.readouterr().err


def test_main_empty_config(workdir, capsys):
    """Test that an empty config downloads nothing and succeeds."""
    (workdir / "config.json").write_text(json.dumps([]))

    assert main([]) == 0
    assert "nothing downloaded" in capsys.readouterr().out


def test_version(capsys):
    """Test the version flag."""
    with pytest.raises(SystemExit) as exc_info:
        main(["--version"])
    assert exc_info.value.code == 0
    assert "Behave Pro Python client" in capsys.readouterr().out
