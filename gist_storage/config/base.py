"""
Configuration for gist-storage.

Settings are read from GIST_* environment variables (optionally a .env file)
and converted into the disk configuration mapping that the driver registry
accepts.
"""

from __future__ import annotations

import os
import pathlib
from typing import Any, TypeVar

import lazy_object_proxy
import pydantic
import pydantic_settings

T = TypeVar('T', bound='GistStorageSettings')


class GistStorageSettings(pydantic_settings.BaseSettings):
    """Gist disk configuration (GIST_TOKEN, GIST_ID, GIST_AUTO_CREATE, ...)."""

    model_config = pydantic_settings.SettingsConfigDict(
        env_prefix='GIST_',
        env_file='.env',
        env_file_encoding='utf-8',
        case_sensitive=True,  # Fail fast on misconfiguration
        extra='forbid',  # Reject unknown GIST_* variables
    )

    # GitHub Personal Access Token with the "gist" scope
    TOKEN: str | None = None

    # Existing gist to store files in, e.g. the last path segment of
    # https://gist.github.com/username/a1b2c3d4e5f6g7h8i9j0
    ID: str | None = None

    # Create a new gist on the first write when ID is unset
    AUTO_CREATE: bool = False

    # Visibility of auto-created gists (existing gists keep theirs)
    PUBLIC: bool = False

    DESCRIPTION: str = 'Files uploaded via gist-storage'

    API_BASE_URL: str = 'https://api.github.com'
    TIMEOUT: float = 30.0

    @pydantic.field_validator('TIMEOUT')
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        """Validate the per-request timeout is positive."""
        if v <= 0:
            raise ValueError('TIMEOUT must be positive')
        return v

    def to_disk_config(self) -> dict[str, Any]:
        """Mapping accepted by gist_storage.drivers.create_filesystem()."""
        return {
            'driver': 'gist',
            'token': self.TOKEN,
            'gist_id': self.ID,
            'auto_create': self.AUTO_CREATE,
            'public': self.PUBLIC,
            'description': self.DESCRIPTION,
            'api_base_url': self.API_BASE_URL,
            'timeout': self.TIMEOUT,
        }


def get_settings(settings_class: type[T], env_file: str | None = None) -> T:
    """
    Factory for creating settings with dynamic .env file loading.

    LOAD_ENV_FILE environment variable specifies custom .env file path.
    When unset, loads from environment variables (and ./.env if present).

    Raises:
        FileNotFoundError: If specified .env file doesn't exist
    """
    env_file_path = env_file or os.getenv('LOAD_ENV_FILE')

    if not env_file_path:
        return settings_class()

    resolved_path = pathlib.Path(env_file_path).resolve()
    if not resolved_path.exists():
        raise FileNotFoundError(f'Environment file not found: {resolved_path}')

    return settings_class(_env_file=resolved_path)


def lazy_settings(settings_class: type[T]) -> T:
    """Lazy settings - defers instantiation until first access."""
    return lazy_object_proxy.Proxy(lambda: get_settings(settings_class))
