"""
GitHub Gist API client.

Thin synchronous wrapper around the Gist REST API:
- Bearer-token authentication on every request
- JSON request/response bodies parsed into pydantic models
- Non-2xx responses mapped to ApiError, network failures to TransportError

There is no retry policy; callers that need one wrap the calls themselves.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import httpx

from gist_storage.exceptions import ApiError, ConfigurationError, DownloadError, TransportError
from gist_storage.schemas import Gist

__all__ = ['GistClient']

logger = logging.getLogger(__name__)


class GistClient:
    """
    Stateless client for the GitHub Gist API.

    Holds only the token and the HTTP connection pool; no gist data is kept
    between calls.
    """

    DEFAULT_BASE_URL = 'https://api.github.com'
    DEFAULT_TIMEOUT = 30.0
    API_VERSION = '2022-11-28'
    USER_AGENT = 'gist-storage/0.1'

    def __init__(
        self,
        token: str,
        *,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            token: GitHub Personal Access Token with 'gist' scope
            base_url: API root (GitHub Enterprise uses https://<host>/api/v3)
            timeout: Per-request ceiling in seconds; exceeding it raises TransportError
            transport: Optional custom transport (used by tests)

        Raises:
            ConfigurationError: If token is empty
        """
        self.token = (token or '').strip()
        if not self.token:
            raise ConfigurationError('GitHub token is required.')

        self.base_url = base_url.rstrip('/')
        self._http = httpx.Client(
            headers={
                'Authorization': f'Bearer {self.token}',
                'Accept': 'application/vnd.github+json',
                'X-GitHub-Api-Version': self.API_VERSION,
                'User-Agent': self.USER_AGENT,
            },
            timeout=timeout,
            transport=transport,
        )

    def close(self) -> None:
        """Close the underlying HTTP client and release resources."""
        self._http.close()

    def __enter__(self) -> GistClient:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # ==========================================================================
    # Gist operations
    # ==========================================================================

    def create_or_update_file(
        self,
        filename: str,
        content: str,
        description: str = '',
        public: bool = False,
        gist_id: str | None = None,
    ) -> Gist:
        """
        Upload one file, creating a new gist or patching an existing one.

        With gist_id, only this file is sent; GitHub merges it into the existing
        file set. Without gist_id, a new gist is created holding just this file.

        Returns:
            Resulting gist metadata (including the assigned id on create)
        """
        if gist_id:
            payload: dict[str, Any] = {'files': {filename: {'content': content}}}
            if description:
                payload['description'] = description
            data = self._request('PATCH', f'/gists/{gist_id}', json=payload)
        else:
            data = self._request(
                'POST',
                '/gists',
                json={
                    'description': description,
                    'public': public,
                    'files': {filename: {'content': content}},
                },
            )
        return Gist.model_validate(data)

    def upload_from_file(
        self,
        file_path: Path | str,
        description: str = '',
        public: bool = False,
        gist_id: str | None = None,
    ) -> Gist:
        """
        Upload a local text file under its basename.

        Raises:
            FileNotFoundError: If file_path is not a file
        """
        path = Path(file_path)
        if not path.is_file():
            raise FileNotFoundError(f'File not found: {path}')
        return self.create_or_update_file(
            filename=path.name,
            content=path.read_text(encoding='utf-8'),
            description=description,
            public=public,
            gist_id=gist_id,
        )

    def fetch_gist(self, gist_id: str) -> Gist:
        """Full gist metadata, including per-file size, raw_url and type."""
        return Gist.model_validate(self._request('GET', f'/gists/{gist_id}'))

    def fetch_file_contents(self, gist_id: str) -> dict[str, str]:
        """
        Full content of every file in the gist.

        The metadata endpoint truncates large files, so each file is fetched
        again from its raw_url, one request at a time.

        Returns:
            Mapping of filename -> content

        Raises:
            DownloadError: If any single raw fetch is not 2xx (no partial result)
        """
        gist = self.fetch_gist(gist_id)

        contents: dict[str, str] = {}
        for name, file in gist.files.items():
            if not file.raw_url:
                raise DownloadError(
                    filename=name,
                    url='',
                    status_code=0,
                    body={'message': f'No raw_url for {name}'},
                )
            response = self._send('GET', file.raw_url, headers={'Accept': 'application/vnd.github.v3.raw'})
            if not response.is_success:
                raise DownloadError(
                    filename=name,
                    url=file.raw_url,
                    status_code=response.status_code,
                    body=_error_body(response),
                )
            contents[name] = response.text

        return contents

    def download_to_dir(self, gist_id: str, directory: Path | str) -> list[Path]:
        """
        Download every gist file into a local directory (created if missing).

        Filenames containing '/' land in matching subdirectories.

        Returns:
            Paths of the written files
        """
        target = Path(directory)
        target.mkdir(parents=True, exist_ok=True)

        saved = []
        for name, content in self.fetch_file_contents(gist_id).items():
            path = target / name
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding='utf-8')
            saved.append(path)
        return saved

    def list_gists(self, page: int = 1, per_page: int = 10) -> list[Gist]:
        """Gists of the authenticated user, one page at a time."""
        data = self._request('GET', '/gists', params={'page': page, 'per_page': per_page})
        return [Gist.model_validate(item) for item in data or []]

    def update_description(self, gist_id: str, description: str) -> Gist:
        """Replace the gist description, leaving files untouched."""
        return Gist.model_validate(self._request('PATCH', f'/gists/{gist_id}', json={'description': description}))

    def delete_gist(self, gist_id: str) -> None:
        """Delete the whole gist (204 No Content on success)."""
        self._request('DELETE', f'/gists/{gist_id}')

    def delete_file_from_gist(self, gist_id: str, filename: str) -> Gist:
        """Remove one file via a partial update whose file entry is null."""
        return Gist.model_validate(self._request('PATCH', f'/gists/{gist_id}', json={'files': {filename: None}}))

    def get_raw_url(self, gist_id: str, filename: str) -> str | None:
        """Raw URL of one file, or None if the gist has no such file."""
        file = self.fetch_gist(gist_id).files.get(filename)
        return file.raw_url if file else None

    def get_gist_if_accessible(self, gist_id: str) -> Gist | None:
        """
        Existence check.

        Returns:
            The gist on HTTP 200; None for any other status or a transport
            failure (the cause is logged at DEBUG, never raised)
        """
        try:
            response = self._send('GET', f'{self.base_url}/gists/{gist_id}')
        except TransportError as e:
            logger.debug('Gist %s not accessible: %s', gist_id, e)
            return None

        if response.status_code != 200:
            logger.debug('Gist %s not accessible: HTTP %s', gist_id, response.status_code)
            return None
        try:
            return Gist.model_validate(response.json())
        except ValueError as e:
            logger.debug('Gist %s not accessible: unreadable body: %s', gist_id, e)
            return None

    def check_gist_id(self, gist_id: str) -> bool:
        """True if the gist exists and the token can read it."""
        return self.get_gist_if_accessible(gist_id) is not None

    # ==========================================================================
    # HTTP plumbing
    # ==========================================================================

    def _send(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        """Issue one request, mapping httpx transport failures to TransportError."""
        logger.debug('%s %s', method, url)
        try:
            return self._http.request(method, url, **kwargs)
        except httpx.TransportError as e:
            raise TransportError(method=method, url=url, cause=e) from e

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        """
        Issue an API request and decode the JSON body.

        Returns:
            Decoded JSON, or None for 204 No Content

        Raises:
            TransportError: Network, timeout or TLS failure
            ApiError: Non-2xx status (redirects are not followed), or a body that is not JSON
        """
        url = f'{self.base_url}{path}'
        response = self._send(method, url, **kwargs)

        if not response.is_success:
            raise ApiError(method=method, url=url, status_code=response.status_code, body=_error_body(response))

        if response.status_code == 204 or not response.content:
            return None

        try:
            return response.json()
        except ValueError:
            raise ApiError(
                method=method,
                url=url,
                status_code=response.status_code,
                body={'message': response.text},
                message=f'GitHub API returned a non-JSON body ({response.status_code}) for {method} {url}',
            ) from None


def _error_body(response: httpx.Response) -> dict[str, Any]:
    """Decoded error body; non-JSON bodies are wrapped as {'message': text}."""
    try:
        body = response.json()
    except ValueError:
        return {'message': response.text}
    if isinstance(body, dict):
        return body
    return {'message': str(body)}
