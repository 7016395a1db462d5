"""Pydantic models for Gist API payloads and filesystem results."""

from gist_storage.schemas.base import PermissiveModel, StrictModel
from gist_storage.schemas.gist import FileAttributes, Gist, GistFile, GistOwner

__all__ = [
    'FileAttributes',
    'Gist',
    'GistFile',
    'GistOwner',
    'PermissiveModel',
    'StrictModel',
]
