"""
Shared fixtures: an in-memory Gist API served through httpx.MockTransport.

FakeGistService answers the subset of the GitHub REST API the client uses
(POST/GET/PATCH/DELETE /gists, raw content URLs) and records every request so
tests can assert on what went over the wire.
"""

from __future__ import annotations

import json
import mimetypes
from collections.abc import Iterator
from typing import Any
from urllib.parse import quote

import httpx
import pytest

from gist_storage.client import GistClient
from gist_storage.storage import GistFilesystem

API_HOST = 'api.github.com'
RAW_HOST = 'gist.githubusercontent.com'
OWNER = 'octocat'


class FakeGistService:
    """In-memory stand-in for the GitHub Gist API."""

    def __init__(self) -> None:
        self.gists: dict[str, dict[str, Any]] = {}
        self.requests: list[httpx.Request] = []
        self.raw_failures: dict[str, int] = {}  # filename -> status for raw fetches
        self.fail_all_with: int | None = None  # status for every API request
        self._next_id = 1

    # -- test helpers ---------------------------------------------------------

    def add_gist(self, files: dict[str, str], description: str = '', public: bool = False) -> str:
        gist_id = f'gist{self._next_id:04d}'
        self._next_id += 1
        self.gists[gist_id] = {'description': description, 'public': public, 'files': dict(files)}
        return gist_id

    def api_requests(self, method: str | None = None) -> list[httpx.Request]:
        return [
            r for r in self.requests if r.url.host == API_HOST and (method is None or r.method == method)
        ]

    def raw_requests(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.host == RAW_HOST]

    def request_json(self, request: httpx.Request) -> Any:
        return json.loads(request.content)

    # -- transport ------------------------------------------------------------

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)

        if request.url.host == RAW_HOST:
            return self._raw(request)

        if self.fail_all_with is not None:
            return httpx.Response(self.fail_all_with, json={'message': 'Server Error'})

        parts = request.url.path.strip('/').split('/')
        if parts == ['gists']:
            if request.method == 'POST':
                return self._create(request)
            if request.method == 'GET':
                return self._list(request)
        elif len(parts) == 2 and parts[0] == 'gists':
            gist_id = parts[1]
            if gist_id not in self.gists:
                return httpx.Response(404, json={'message': 'Not Found'})
            if request.method == 'GET':
                return httpx.Response(200, json=self._payload(gist_id))
            if request.method == 'PATCH':
                return self._update(gist_id, request)
            if request.method == 'DELETE':
                del self.gists[gist_id]
                return httpx.Response(204)

        return httpx.Response(404, json={'message': 'Not Found'})

    def _create(self, request: httpx.Request) -> httpx.Response:
        body = self.request_json(request)
        files = {name: entry['content'] for name, entry in body['files'].items()}
        gist_id = self.add_gist(files, body.get('description', ''), body.get('public', False))
        return httpx.Response(201, json=self._payload(gist_id))

    def _update(self, gist_id: str, request: httpx.Request) -> httpx.Response:
        body = self.request_json(request)
        gist = self.gists[gist_id]
        if 'description' in body:
            gist['description'] = body['description']
        for name, entry in body.get('files', {}).items():
            if entry is None:
                gist['files'].pop(name, None)
            else:
                gist['files'][name] = entry['content']
        return httpx.Response(200, json=self._payload(gist_id))

    def _list(self, request: httpx.Request) -> httpx.Response:
        page = int(request.url.params.get('page', 1))
        per_page = int(request.url.params.get('per_page', 30))
        ids = sorted(self.gists)[(page - 1) * per_page : page * per_page]
        return httpx.Response(200, json=[self._payload(gist_id, with_content=False) for gist_id in ids])

    def _raw(self, request: httpx.Request) -> httpx.Response:
        # /{owner}/{gist_id}/raw/{filename}
        _, _owner, gist_id, _raw, filename = request.url.path.split('/', 4)
        if filename in self.raw_failures:
            return httpx.Response(self.raw_failures[filename], text='404: Not Found')
        content = self.gists.get(gist_id, {}).get('files', {}).get(filename)
        if content is None:
            return httpx.Response(404, text='404: Not Found')
        return httpx.Response(200, text=content)

    def _payload(self, gist_id: str, with_content: bool = True) -> dict[str, Any]:
        gist = self.gists[gist_id]
        files = {}
        for name, content in gist['files'].items():
            entry: dict[str, Any] = {
                'filename': name,
                'type': mimetypes.guess_type(name)[0] or 'text/plain',
                'language': None,
                'raw_url': f'https://{RAW_HOST}/{OWNER}/{gist_id}/raw/{quote(name, safe="")}',
                'size': len(content.encode('utf-8')),
            }
            if with_content:
                entry['truncated'] = False
                entry['content'] = content
            files[name] = entry
        return {
            'id': gist_id,
            'url': f'https://{API_HOST}/gists/{gist_id}',
            'html_url': f'https://gist.github.com/{OWNER}/{gist_id}',
            'description': gist['description'],
            'public': gist['public'],
            'files': files,
            'owner': {'login': OWNER, 'id': 1},
            'created_at': '2024-01-01T00:00:00Z',
            'updated_at': '2024-01-02T00:00:00Z',
            'comments': 0,
        }


@pytest.fixture
def fake_gist() -> FakeGistService:
    return FakeGistService()


@pytest.fixture
def transport(fake_gist: FakeGistService) -> httpx.MockTransport:
    return httpx.MockTransport(fake_gist.handler)


@pytest.fixture
def client(transport: httpx.MockTransport) -> Iterator[GistClient]:
    with GistClient('test-token', transport=transport) as c:
        yield c


@pytest.fixture
def gist_id(fake_gist: FakeGistService) -> str:
    """An existing gist with two files, one under a 'docs/' prefix."""
    return fake_gist.add_gist({'readme.md': '# Notes', 'docs/guide.txt': 'step one'})


@pytest.fixture
def filesystem(client: GistClient, gist_id: str) -> GistFilesystem:
    return GistFilesystem(client, gist_id)
