"""
Settings for fetching feature files from Behave Pro.

This module provides the immutable Settings record used by every stage of
the pipeline, together with:
- Loading of per-project records from a JSON configuration file
- Merging of caller-supplied values, environment variables and defaults
- Validation of the required credentials
"""

import os
import json
import logging
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Optional, List, Dict, Any, Union

from ..api.errors import ConfigNotFound, ConfigInvalid, MissingField

logger = logging.getLogger(__name__)

DEFAULT_HOST = "https://behave.pro"
DEFAULT_OUTPUT = "features"
DEFAULT_CONFIG = "config.json"

# Keys accepted in config records and their Settings attribute
FIELD_ALIASES = {
    'host': 'host',
    'id': 'project_id',
    'projectId': 'project_id',
    'project': 'project_id',
    'key': 'project_id',
    'userId': 'user_id',
    'user': 'user_id',
    'apiKey': 'api_key',
    'api': 'api_key',
    'password': 'api_key',
    'output': 'output',
    'dir': 'output',
    'directory': 'output',
    'manual': 'manual',
    'm': 'manual',
    'config': 'config',
    'timeout': 'timeout',
}

# Validation order and the names reported for missing fields
REQUIRED_FIELDS = (
    ('project_id', 'projectId'),
    ('user_id', 'userId'),
    ('api_key', 'apiKey'),
)


def _parse_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ('true', '1', 'yes')
    return bool(value)


def _normalize(name: str, value: Any) -> Any:
    """Coerce a raw value to the type of the Settings attribute."""
    if value is None:
        return None
    if name == 'manual':
        return _parse_bool(value)
    if name == 'timeout':
        return float(value)
    return str(value)


@dataclass(frozen=True)
class Settings:
    """
    Resolved configuration for one project fetch.

    Instances are immutable; per-project variants are derived with
    ``dataclasses.replace`` so no defaults are shared between pipelines.
    """

    host: str = DEFAULT_HOST
    project_id: Optional[str] = None
    user_id: Optional[str] = None
    api_key: Optional[str] = field(default=None, repr=False)
    output: str = DEFAULT_OUTPUT
    manual: bool = False
    config: str = DEFAULT_CONFIG
    timeout: Optional[float] = None  # None waits indefinitely

    @property
    def has_credentials(self) -> bool:
        """True when project id, user id and api key are all present."""
        return all(getattr(self, name) for name, _ in REQUIRED_FIELDS)

    @property
    def project_dir(self) -> Path:
        """Destination directory ``<output>/<projectId>``."""
        return Path(self.output) / str(self.project_id)

    def merged(self, overrides: Dict[str, Any]) -> 'Settings':
        """
        Return a copy with the given fields replaced.

        Keys may be Settings attribute names or any alias from
        FIELD_ALIASES. None values are skipped so they never erase a value
        already present.

        Raises:
            ValueError: If a key is not a known setting
        """
        known = {f.name for f in fields(self)}
        changes = {}
        for key, value in overrides.items():
            name = key if key in known else FIELD_ALIASES.get(key)
            if name is None:
                raise ValueError(f"Unknown setting: {key}")
            if value is None:
                continue
            changes[name] = _normalize(name, value)
        return replace(self, **changes)

    @classmethod
    def from_env(cls) -> 'Settings':
        """Create settings from BEHAVEPRO_* environment variables."""
        return cls().merged({
            'host': os.getenv('BEHAVEPRO_HOST'),
            'project_id': os.getenv('BEHAVEPRO_PROJECT_ID'),
            'user_id': os.getenv('BEHAVEPRO_USER_ID'),
            'api_key': os.getenv('BEHAVEPRO_API_KEY'),
            'output': os.getenv('BEHAVEPRO_OUTPUT'),
            'manual': os.getenv('BEHAVEPRO_MANUAL'),
            'config': os.getenv('BEHAVEPRO_CONFIG'),
            'timeout': os.getenv('BEHAVEPRO_TIMEOUT'),
        })


def validate_settings(settings: Settings) -> None:
    """
    Check that the credentials needed for a download are present.

    Only the first missing field is reported, in the order
    projectId, userId, apiKey.

    Raises:
        MissingField: If a required field is missing or empty
    """
    for name, label in REQUIRED_FIELDS:
        if not getattr(settings, name):
            raise MissingField(label)


def load_config_records(path: Union[str, Path]) -> List[Dict[str, Any]]:
    """
    Load the list of per-project records from a JSON file.

    Args:
        path: Path to the configuration file

    Returns:
        List of partial settings dictionaries, possibly empty

    Raises:
        ConfigNotFound: If the file is missing or unreadable
        ConfigInvalid: If the file is not a JSON array of objects
    """
    path = Path(path)
    try:
        text = path.read_text(encoding='utf-8')
    except (OSError, UnicodeDecodeError) as e:
        logger.debug(f"Reading config {path} failed: {e}")
        raise ConfigNotFound(path) from e

    try:
        records = json.loads(text)
    except json.JSONDecodeError as e:
        raise ConfigInvalid(path, f"not valid JSON ({e})") from e

    if not isinstance(records, list):
        raise ConfigInvalid(path, "expected a JSON array of project settings")

    for index, record in enumerate(records):
        if not isinstance(record, dict):
            raise ConfigInvalid(path, f"entry {index} is not an object")

    logger.info(f"Loaded {len(records)} project configuration(s) from {path}")
    return records


def _apply_record(base: Settings, record: Dict[str, Any], path: Path) -> Settings:
    known = {f.name for f in fields(base)}
    usable = {}
    for key, value in record.items():
        if key in known or key in FIELD_ALIASES:
            usable[key] = value
        else:
            logger.warning(f"Ignoring unknown setting '{key}' in {path}")
    try:
        return base.merged(usable)
    except ValueError as e:
        raise ConfigInvalid(path, str(e)) from e


def resolve_settings(base: Settings, cwd: Optional[Union[str, Path]] = None) -> List[Settings]:
    """
    Expand caller-supplied settings into one Settings per project.

    With explicit credentials the base settings are returned as the only
    entry. Otherwise the config file ``<cwd>/<base.config>`` is read and
    every record in it is merged over the base.

    Args:
        base: Caller-supplied settings
        cwd: Directory the config path is relative to (default: current directory)

    Returns:
        List of resolved settings in configuration order
    """
    if base.has_credentials:
        return [base]
    return settings_from_config(base, cwd=cwd)


def settings_from_config(base: Settings, cwd: Optional[Union[str, Path]] = None) -> List[Settings]:
    """Merge every record of ``<cwd>/<base.config>`` over the base settings."""
    config_path = Path(cwd if cwd is not None else os.getcwd()) / base.config
    records = load_config_records(config_path)
    return [_apply_record(base, record, config_path) for record in records]
