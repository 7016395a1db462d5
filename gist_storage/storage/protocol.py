"""
Filesystem adapter protocol.

Defines the operation set a storage backend exposes to callers. GistFilesystem
is the one implementation shipped here; other backends implement the same
methods without inheriting from anything.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import BinaryIO, Protocol, runtime_checkable

from gist_storage.schemas import FileAttributes


@runtime_checkable
class FilesystemAdapter(Protocol):
    """Protocol for path-addressed file storage backends."""

    def file_exists(self, path: str) -> bool:
        """
        Check if a file exists.

        Raises:
            OperationFailedError: If the backend could not be queried
        """
        ...

    def directory_exists(self, path: str) -> bool: ...

    def write(
        self,
        path: str,
        contents: bytes | str,
        *,
        description: str | None = None,
        public: bool | None = None,
    ) -> None:
        """
        Create or replace a file.

        Raises:
            InvalidContentError: If the backend cannot store the content
            OperationFailedError: If the write failed
        """
        ...

    def write_stream(
        self,
        path: str,
        stream: BinaryIO,
        *,
        description: str | None = None,
        public: bool | None = None,
    ) -> None: ...

    def read(self, path: str) -> bytes:
        """
        Read a whole file.

        Raises:
            GistFileNotFoundError: If the file does not exist
            OperationFailedError: If the read failed
        """
        ...

    def read_stream(self, path: str) -> BinaryIO: ...

    def delete(self, path: str) -> None: ...

    def delete_directory(self, path: str) -> None: ...

    def create_directory(self, path: str) -> None: ...

    def set_visibility(self, path: str, visibility: str) -> None: ...

    def visibility(self, path: str) -> FileAttributes: ...

    def mime_type(self, path: str) -> FileAttributes: ...

    def last_modified(self, path: str) -> FileAttributes: ...

    def file_size(self, path: str) -> FileAttributes: ...

    def list_contents(self, path: str = '', deep: bool = True) -> Iterable[FileAttributes]:
        """
        Entries under path. The returned iterable may be iterated more than once.
        """
        ...

    def move(self, source: str, destination: str) -> None: ...

    def copy(self, source: str, destination: str) -> None: ...
