"""Filesystem adapters."""

from gist_storage.storage.cache import CachedFile, CacheState, GistFileCache
from gist_storage.storage.gist import DirectoryListing, GistFilesystem
from gist_storage.storage.protocol import FilesystemAdapter

__all__ = [
    'CacheState',
    'CachedFile',
    'DirectoryListing',
    'FilesystemAdapter',
    'GistFileCache',
    'GistFilesystem',
]
