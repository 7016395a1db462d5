"""Environment-driven configuration."""

from gist_storage.config.base import GistStorageSettings, get_settings, lazy_settings

# Module-level singleton (lazy-loaded)
settings = lazy_settings(GistStorageSettings)

__all__ = ['GistStorageSettings', 'get_settings', 'lazy_settings', 'settings']
