"""Settings file loading and validation.

This module loads optional tuning settings from a YAML file and applies
environment overrides (a .env file is honoured through python-dotenv).
Nothing is written back: each run reads its settings fresh.
"""

import os
from typing import Any, Dict

import yaml
from dotenv import load_dotenv

from .errors import ConfigError
from .models import SyncSettings


class SettingsLoader:
    """Handles settings file loading and validation.

    Settings file structure (every field optional):
        api_url: "https://directory.example.com/api/v1"
        timeout: 30
        invite_batch_size: 100
        delete_batch_size: 50
        move_batch_size: 100

    A missing or empty file yields the defaults. The environment variables
    ROSTER_SYNC_API_URL and ROSTER_SYNC_TIMEOUT override the file.
    """

    DEFAULT_SETTINGS_FILE = '.roster-sync.yaml'

    BATCH_FIELDS = ('invite_batch_size', 'delete_batch_size', 'move_batch_size')

    @classmethod
    def load(cls, settings_path: str = DEFAULT_SETTINGS_FILE) -> SyncSettings:
        """Load settings from a YAML file plus environment overrides.

        Args:
            settings_path: Path to the YAML settings file

        Returns:
            Validated SyncSettings

        Raises:
            ConfigError: If the file is unreadable or holds invalid values
        """
        load_dotenv()

        try:
            with open(settings_path, 'r', encoding='utf-8') as f:
                content = f.read()
        except FileNotFoundError:
            content = ""
        except PermissionError:
            raise ConfigError(f"Permission denied reading {settings_path}")
        except Exception as e:
            raise ConfigError(f"Cannot read {settings_path}: {e}")

        try:
            settings_dict = yaml.safe_load(content) if content.strip() else None
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML syntax: {str(e)}")

        if settings_dict is None:
            settings_dict = {}

        if not isinstance(settings_dict, dict):
            raise ConfigError(
                f"Settings must be a YAML dictionary, got {type(settings_dict).__name__}"
            )

        settings_dict = dict(settings_dict)
        env_url = os.getenv('ROSTER_SYNC_API_URL')
        if env_url:
            settings_dict['api_url'] = env_url
        env_timeout = os.getenv('ROSTER_SYNC_TIMEOUT')
        if env_timeout:
            try:
                settings_dict['timeout'] = float(env_timeout)
            except ValueError:
                raise ConfigError(
                    f"ROSTER_SYNC_TIMEOUT must be a number, got '{env_timeout}'",
                    'timeout'
                )

        return cls._parse_settings(settings_dict)

    @classmethod
    def _parse_settings(cls, settings_dict: Dict[str, Any]) -> SyncSettings:
        """Parse and validate the settings dictionary.

        Raises:
            ConfigError: If a field has the wrong type or range
        """
        unknown = set(settings_dict) - {'api_url', 'timeout', *cls.BATCH_FIELDS}
        if unknown:
            raise ConfigError(f"Unknown setting(s): {', '.join(sorted(unknown))}")

        settings = SyncSettings()

        api_url = settings_dict.get('api_url')
        if api_url is not None:
            if not isinstance(api_url, str) or not api_url.strip():
                raise ConfigError("Field 'api_url' must be a non-empty string", 'api_url')
            if not api_url.startswith(('https://', 'http://')):
                raise ConfigError(
                    f"Field 'api_url' must start with http:// or https://, got '{api_url}'",
                    'api_url'
                )
            settings.api_url = api_url.strip().rstrip('/')

        timeout = settings_dict.get('timeout')
        if timeout is not None:
            if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
                raise ConfigError("Field 'timeout' must be a positive number", 'timeout')
            settings.timeout = timeout

        for field_name in cls.BATCH_FIELDS:
            value = settings_dict.get(field_name)
            if value is None:
                continue
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise ConfigError(
                    f"Field '{field_name}' must be a positive integer, got {value!r}",
                    field_name
                )
            setattr(settings, field_name, value)

        return settings
