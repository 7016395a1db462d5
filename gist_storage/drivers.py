"""
Storage driver registry.

A driver is a name plus a factory that turns a disk configuration mapping into
a FilesystemAdapter. The 'gist' driver is registered on import.

Example:
    fs = create_filesystem({'driver': 'gist', 'token': '...', 'gist_id': 'abc123'})
    fs.write('hello.txt', 'Hello, World!')
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any, Literal

import pydantic

from gist_storage.client import GistClient
from gist_storage.exceptions import ConfigurationError
from gist_storage.storage import FilesystemAdapter, GistFilesystem

__all__ = [
    'DriverFactory',
    'GistDiskConfig',
    'available_drivers',
    'create_filesystem',
    'create_gist_filesystem',
    'register_driver',
]

logger = logging.getLogger(__name__)

DriverFactory = Callable[..., FilesystemAdapter]

_DRIVERS: dict[str, DriverFactory] = {}


class GistDiskConfig(pydantic.BaseModel):
    """Recognized options of the 'gist' driver."""

    model_config = pydantic.ConfigDict(extra='forbid', frozen=True)

    driver: Literal['gist'] = 'gist'
    token: str | None = None
    gist_id: str | None = None
    auto_create: bool = False
    public: bool = False
    description: str = 'Files uploaded via gist-storage'
    api_base_url: str = GistClient.DEFAULT_BASE_URL
    timeout: float = GistClient.DEFAULT_TIMEOUT


def register_driver(name: str, factory: DriverFactory) -> None:
    """Register (or replace) the factory for a driver name."""
    if name in _DRIVERS:
        logger.debug('Replacing storage driver %r', name)
    _DRIVERS[name] = factory


def available_drivers() -> list[str]:
    return sorted(_DRIVERS)


def create_filesystem(config: Mapping[str, Any], **options: Any) -> FilesystemAdapter:
    """
    Build the adapter for config['driver'] (default 'gist').

    Args:
        config: Disk configuration
        **options: Passed to the driver factory (e.g. transport=)

    Raises:
        ConfigurationError: Unknown driver or invalid configuration
    """
    name = config.get('driver', 'gist')
    factory = _DRIVERS.get(name)
    if factory is None:
        raise ConfigurationError(f'Unknown storage driver {name!r}. Available: {", ".join(available_drivers())}')
    return factory(config, **options)


def create_gist_filesystem(config: Mapping[str, Any], **options: Any) -> GistFilesystem:
    """
    Factory for the 'gist' driver.

    Configuration is checked before the client exists, so a bad configuration
    never reaches the network.

    Raises:
        ConfigurationError: Missing token, missing gist_id without auto_create,
            or unrecognized options
    """
    try:
        disk = GistDiskConfig.model_validate(dict(config))
    except pydantic.ValidationError as e:
        raise ConfigurationError(f'Invalid gist disk configuration: {e}') from e

    if not disk.token or not disk.token.strip():
        raise ConfigurationError('Gist storage requires a GitHub token.')

    if not disk.gist_id and not disk.auto_create:
        raise ConfigurationError('Gist storage requires a gist_id (or auto_create enabled).')

    client = GistClient(
        disk.token,
        base_url=disk.api_base_url,
        timeout=disk.timeout,
        transport=options.get('transport'),
    )
    return GistFilesystem(
        client,
        disk.gist_id,
        auto_create=disk.auto_create,
        public=disk.public,
        description=disk.description,
    )


register_driver('gist', create_gist_filesystem)
