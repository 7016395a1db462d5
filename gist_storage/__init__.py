"""GitHub Gist backed filesystem adapter."""

from gist_storage.client import GistClient
from gist_storage.drivers import create_filesystem, register_driver
from gist_storage.exceptions import (
    ApiError,
    ConfigurationError,
    DownloadError,
    FilesystemError,
    GistClientError,
    GistFileNotFoundError,
    GistStorageError,
    InvalidContentError,
    NotSupportedError,
    OperationFailedError,
    TransportError,
)
from gist_storage.storage import FilesystemAdapter, GistFilesystem

__all__ = [
    'ApiError',
    'ConfigurationError',
    'DownloadError',
    'FilesystemAdapter',
    'FilesystemError',
    'GistClient',
    'GistClientError',
    'GistFileNotFoundError',
    'GistFilesystem',
    'GistStorageError',
    'InvalidContentError',
    'NotSupportedError',
    'OperationFailedError',
    'TransportError',
    'create_filesystem',
    'register_driver',
]
