"""
Shared exceptions for gist-storage.

Exception Hierarchy:
    GistStorageError (base)
    ├── ConfigurationError (missing token, missing gist id without auto-create)
    ├── InvalidContentError (non-UTF-8 or oversized content)
    ├── GistClientError (Gist API client failures)
    │   ├── TransportError (timeout, connection, TLS)
    │   └── ApiError (non-2xx status or non-JSON body)
    │       └── DownloadError (raw-content fetch failed for one file)
    └── FilesystemError (adapter operation failures, carry operation + path)
        ├── GistFileNotFoundError (path is not in the gist)
        ├── NotSupportedError (directories, visibility, timestamps)
        └── OperationFailedError (client failure during an adapter operation)
"""

from __future__ import annotations

from typing import Any


class GistStorageError(Exception):
    """Base exception for all gist-storage errors."""


class ConfigurationError(GistStorageError):
    """Raised at construction/registration when configuration is unusable."""


class InvalidContentError(GistStorageError, ValueError):
    """Raised when content cannot be stored in a gist (binary or too large)."""


# ==============================================================================
# Client errors
# ==============================================================================


class GistClientError(GistStorageError):
    """Base exception for Gist API client failures."""

    def __init__(self, message: str, *, method: str, url: str) -> None:
        self.method = method
        self.url = url
        super().__init__(message)


class TransportError(GistClientError):
    """Raised when a request never produced an HTTP response."""

    def __init__(self, *, method: str, url: str, cause: BaseException) -> None:
        self.cause = cause
        super().__init__(f'{method} {url} failed: {type(cause).__name__}: {cause}', method=method, url=url)


class ApiError(GistClientError):
    """Raised when GitHub answers with a non-2xx status or an undecodable body."""

    def __init__(
        self,
        *,
        method: str,
        url: str,
        status_code: int,
        body: dict[str, Any],
        message: str | None = None,
    ) -> None:
        self.status_code = status_code
        self.body = body
        self.api_message = str(body.get('message', ''))
        if message is None:
            message = f'GitHub API error ({status_code}) while requesting {method} {url}: {self.api_message or body}'
        super().__init__(message, method=method, url=url)


class DownloadError(ApiError):
    """Raised when the raw content of a single gist file cannot be fetched."""

    def __init__(self, *, filename: str, url: str, status_code: int, body: dict[str, Any]) -> None:
        self.filename = filename
        super().__init__(
            method='GET',
            url=url,
            status_code=status_code,
            body=body,
            message=f'Failed to download {filename} (HTTP {status_code})',
        )


# ==============================================================================
# Filesystem errors
# ==============================================================================


class FilesystemError(GistStorageError):
    """Base exception for filesystem adapter operations."""

    def __init__(self, operation: str, path: str, reason: str) -> None:
        self.operation = operation
        self.path = path
        self.reason = reason
        super().__init__(f'Unable to {operation} {path!r}: {reason}')


class GistFileNotFoundError(FilesystemError):
    """Raised when a path is not present in the gist."""

    def __init__(self, operation: str, path: str) -> None:
        super().__init__(operation, path, 'file not found in gist')


class NotSupportedError(FilesystemError):
    """Raised for operations the flat gist namespace has no concept of."""


class OperationFailedError(FilesystemError):
    """Raised when the Gist API call behind an adapter operation fails."""

    def __init__(self, operation: str, path: str, cause: GistClientError) -> None:
        self.cause = cause
        super().__init__(operation, path, str(cause))

    @property
    def status_code(self) -> int | None:
        """HTTP status of the underlying API error, None for transport failures."""
        return getattr(self.cause, 'status_code', None)
