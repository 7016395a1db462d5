"""
Gist API and filesystem result models.

Gist payloads are validated with PermissiveModel (GitHub returns many more
fields than we model). FileAttributes is produced by the adapter itself and
uses StrictModel.
"""

from __future__ import annotations

from gist_storage.schemas.base import PermissiveModel, StrictModel


class GistOwner(PermissiveModel):
    """Owner of a gist (only the fields we display)."""

    login: str
    id: int | None = None
    html_url: str | None = None


class GistFile(PermissiveModel):
    """
    One file entry of a gist.

    The metadata endpoint returns at most ~1MB of `content` per file and sets
    `truncated` when it cut it short; full content lives behind `raw_url`.
    List endpoints omit `content` and `truncated` altogether.
    """

    filename: str | None = None
    type: str | None = None  # Declared content type, e.g. 'text/plain'
    language: str | None = None
    raw_url: str | None = None
    size: int = 0
    truncated: bool | None = None
    content: str | None = None
    encoding: str | None = None


class Gist(PermissiveModel):
    """Gist metadata as returned by POST/PATCH/GET /gists[/{id}]."""

    id: str
    html_url: str | None = None
    url: str | None = None
    description: str | None = None
    public: bool = False
    files: dict[str, GistFile] = {}
    owner: GistOwner | None = None
    created_at: str | None = None  # ISO 8601, kept as sent
    updated_at: str | None = None
    truncated: bool | None = None  # True when the file list itself was cut short


class FileAttributes(StrictModel):
    """Attributes of one file, as reported by metadata and listing operations."""

    path: str
    file_size: int | None = None
    mime_type: str | None = None
