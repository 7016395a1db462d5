"""
GitHub Gist filesystem adapter.

Maps filesystem operations onto a single gist. A gist is a flat mapping of
filename -> text, so "directories" exist only as a naming convention
(prefix + '/') used by list_contents; nothing directory-shaped is ever stored.

File metadata (size, content type, raw URL) is served from a whole-gist cache
that is loaded on first query and dropped after every mutation made through
this adapter. Changes made elsewhere (other adapters, the Gist website) are
not seen until the next invalidation.
"""

from __future__ import annotations

import io
import logging
import threading
from collections.abc import Iterator, Mapping
from typing import BinaryIO

from gist_storage.client import GistClient
from gist_storage.exceptions import (
    ConfigurationError,
    GistClientError,
    GistFileNotFoundError,
    InvalidContentError,
    NotSupportedError,
    OperationFailedError,
)
from gist_storage.schemas import FileAttributes
from gist_storage.storage.cache import CachedFile, GistFileCache

__all__ = ['GistFilesystem', 'DirectoryListing']

logger = logging.getLogger(__name__)


class GistFilesystem:
    """
    Filesystem adapter backed by one GitHub Gist.

    Implements the FilesystemAdapter protocol. Intended for single-threaded
    use per instance; the cache tolerates concurrent load/invalidate, but a
    thread may still read a snapshot taken just before another thread's write.
    """

    # GitHub API limits: 100MB hard limit
    MAX_FILE_SIZE_MB = 100

    DEFAULT_MIME_TYPE = 'text/plain'

    def __init__(
        self,
        client: GistClient,
        gist_id: str | None = None,
        *,
        auto_create: bool = False,
        public: bool = False,
        description: str = '',
    ) -> None:
        """
        Initialize the adapter. No network call is made here.

        Args:
            client: Gist API client
            gist_id: Existing gist to store files in
            auto_create: Create a new gist on the first write if gist_id is None
            public: Visibility of an auto-created gist
            description: Description of an auto-created gist; later writes leave
                the gist description untouched unless they pass their own

        Raises:
            ConfigurationError: If gist_id is missing and auto_create is False
        """
        if not gist_id and not auto_create:
            raise ConfigurationError('Gist storage requires a gist_id (or auto_create enabled).')

        self._client = client
        self._gist_id = gist_id or None
        self.auto_create = auto_create
        self.public = public
        self.description = description
        self._create_lock = threading.Lock()
        self._cache = GistFileCache(self._load_entries)

    @property
    def gist_id(self) -> str | None:
        """Gist in use; None until the first write when auto-creating."""
        return self._gist_id

    @property
    def client(self) -> GistClient:
        return self._client

    @property
    def cache(self) -> GistFileCache:
        return self._cache

    # ==========================================================================
    # Queries
    # ==========================================================================

    def file_exists(self, path: str) -> bool:
        try:
            return path in self._cache
        except GistClientError as e:
            raise OperationFailedError('check existence of', path, e) from e

    def directory_exists(self, path: str) -> bool:
        # Gists have no directories
        return False

    def read(self, path: str) -> bytes:
        """
        Read one file.

        Downloads the full content of every file in the gist (one request per
        file) and selects path; metadata previews are truncated for large files.
        """
        if self._gist_id is None:
            raise GistFileNotFoundError('read', path)

        try:
            contents = self._client.fetch_file_contents(self._gist_id)
        except GistClientError as e:
            raise OperationFailedError('read', path, e) from e

        if path not in contents:
            raise GistFileNotFoundError('read', path)
        return contents[path].encode('utf-8')

    def read_text(self, path: str) -> str:
        return self.read(path).decode('utf-8')

    def read_stream(self, path: str) -> BinaryIO:
        return io.BytesIO(self.read(path))

    def file_size(self, path: str) -> FileAttributes:
        entry = self._lookup('retrieve file size of', path)
        return FileAttributes(path=path, file_size=entry.size)

    def mime_type(self, path: str) -> FileAttributes:
        entry = self._lookup('retrieve mime type of', path)
        return FileAttributes(path=path, mime_type=entry.mime_type)

    def list_contents(self, path: str = '', deep: bool = True) -> DirectoryListing:
        """
        Files whose name starts with path + '/' (all files when path is empty).

        The listing is flat regardless of deep: nested names are ordinary
        entries and no directory entries are produced. Nothing is fetched until
        the result is iterated; each iteration reads the current cache.
        """
        return DirectoryListing(self, path)

    # ==========================================================================
    # Mutations (every one invalidates the cache)
    # ==========================================================================

    def write(
        self,
        path: str,
        contents: bytes | str,
        *,
        description: str | None = None,
        public: bool | None = None,
    ) -> None:
        """
        Create or replace one file with a single-file patch.

        Args:
            path: Filename inside the gist ('/' allowed, it is just a character)
            contents: UTF-8 text (gists cannot hold binary data)
            description: Gist description to set alongside this write. When
                omitted, an update leaves the description as it is and only a
                creating write falls back to the configured description
            public: Visibility, only honoured when this write creates the gist

        Raises:
            InvalidContentError: Binary or oversized content
            OperationFailedError: The API call failed
        """
        text = self._to_text(path, contents)
        try:
            self._upload(path, text, description, public)
        except GistClientError as e:
            raise OperationFailedError('write', path, e) from e
        finally:
            self._cache.invalidate()

        logger.info('Wrote %s to gist %s (%d bytes)', path, self._gist_id, len(text.encode('utf-8')))

    def write_stream(
        self,
        path: str,
        stream: BinaryIO,
        *,
        description: str | None = None,
        public: bool | None = None,
    ) -> None:
        self.write(path, stream.read(), description=description, public=public)

    def delete(self, path: str) -> None:
        """Delete one file via a deletion-marker patch."""
        if self._gist_id is None:
            raise GistFileNotFoundError('delete', path)

        try:
            self._client.delete_file_from_gist(self._gist_id, path)
        except GistClientError as e:
            raise OperationFailedError('delete', path, e) from e
        finally:
            self._cache.invalidate()

        logger.info('Deleted %s from gist %s', path, self._gist_id)

    def move(self, source: str, destination: str) -> None:
        """
        read -> write -> delete. Not atomic: if the delete fails, both files
        remain. The first failing step's error propagates as-is.
        """
        if source == destination:
            logger.debug('Move of %s onto itself skipped', source)
            return

        contents = self.read(source)
        self.write(destination, contents)
        self.delete(source)

    def copy(self, source: str, destination: str) -> None:
        contents = self.read(source)
        self.write(destination, contents)

    # ==========================================================================
    # Unsupported operations
    # ==========================================================================

    def create_directory(self, path: str) -> None:
        raise NotSupportedError('create directory', path, 'Gist does not support directories')

    def delete_directory(self, path: str) -> None:
        raise NotSupportedError('delete directory', path, 'Gist does not support directories')

    def set_visibility(self, path: str, visibility: str) -> None:
        raise NotSupportedError('set visibility of', path, 'Gist visibility is set at gist level, not file level')

    def visibility(self, path: str) -> FileAttributes:
        raise NotSupportedError(
            'retrieve visibility of', path, 'Gist visibility is set at gist level, not file level'
        )

    def last_modified(self, path: str) -> FileAttributes:
        raise NotSupportedError(
            'retrieve last modified time of', path, 'Gist API does not provide file-level modification time'
        )

    # ==========================================================================
    # Internals
    # ==========================================================================

    def _load_entries(self) -> Mapping[str, CachedFile]:
        """Cache loader: one metadata fetch for the whole gist."""
        if self._gist_id is None:
            return {}

        gist = self._client.fetch_gist(self._gist_id)
        return {
            name: CachedFile(
                size=file.size,
                raw_url=file.raw_url,
                mime_type=file.type or self.DEFAULT_MIME_TYPE,
            )
            for name, file in gist.files.items()
        }

    def _lookup(self, operation: str, path: str) -> CachedFile:
        try:
            entry = self._cache.get(path)
        except GistClientError as e:
            raise OperationFailedError(operation, path, e) from e

        if entry is None:
            raise GistFileNotFoundError(operation, path)
        return entry

    def _to_text(self, path: str, contents: bytes | str) -> str:
        """Validate content is storable; returns it as text."""
        data = contents.encode('utf-8') if isinstance(contents, str) else bytes(contents)

        size_mb = len(data) / (1024 * 1024)
        if size_mb > self.MAX_FILE_SIZE_MB:
            raise InvalidContentError(
                f'File too large for Gist: {path} is {size_mb:.2f}MB. '
                f'GitHub Gist files are limited to {self.MAX_FILE_SIZE_MB}MB.'
            )

        if isinstance(contents, str):
            return contents
        try:
            return data.decode('utf-8')
        except UnicodeDecodeError:
            raise InvalidContentError(
                f'Binary content not supported by GitHub Gists: {path}. Gists only support UTF-8 text files.'
            ) from None

    def _upload(self, path: str, text: str, description: str | None, public: bool | None) -> None:
        if self._gist_id is None:
            with self._create_lock:
                # Only the first writer creates the gist; later ones patch into it
                if self._gist_id is None:
                    gist = self._client.create_or_update_file(
                        filename=path,
                        content=text,
                        description=self.description if description is None else description,
                        public=self.public if public is None else public,
                    )
                    self._gist_id = gist.id
                    logger.warning(
                        'Created gist %s (%s); persist this id, it is only held in memory', gist.id, gist.html_url
                    )
                    return

        self._client.create_or_update_file(
            filename=path,
            content=text,
            description=description or '',
            gist_id=self._gist_id,
        )


class DirectoryListing:
    """
    Lazy, restartable listing of gist files under a prefix.

    A failed cache load is logged and yields nothing rather than raising.
    """

    def __init__(self, filesystem: GistFilesystem, path: str) -> None:
        self._filesystem = filesystem
        self.prefix = path.strip('/')

    def __iter__(self) -> Iterator[FileAttributes]:
        try:
            entries = self._filesystem.cache.entries()
        except GistClientError as e:
            logger.warning('Listing %r returned no entries, gist metadata could not be loaded: %s', self.prefix, e)
            return

        for name, entry in entries.items():
            if self.prefix and not name.startswith(self.prefix + '/'):
                continue
            yield FileAttributes(path=name, file_size=entry.size, mime_type=entry.mime_type)
