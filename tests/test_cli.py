"""Tests for the gist-storage command-line interface."""

from __future__ import annotations

import functools

import httpx
import pytest
from typer.testing import CliRunner

from gist_storage.cli import main
from gist_storage.client import GistClient
from gist_storage.config import GistStorageSettings
from gist_storage.drivers import create_gist_filesystem
from gist_storage.storage import GistFilesystem
from tests.conftest import FakeGistService

runner = CliRunner()


@pytest.fixture(autouse=True)
def cli_env(monkeypatch: pytest.MonkeyPatch, transport: httpx.MockTransport) -> None:
    """Route the CLI's clients through the fake Gist API and ignore local GIST_* settings."""
    for name in ('GIST_TOKEN', 'GIST_ID', 'GIST_AUTO_CREATE', 'GITHUB_TOKEN', 'LOAD_ENV_FILE'):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(main, 'settings', GistStorageSettings(_env_file=None))
    monkeypatch.setattr(main, 'create_gist_filesystem', functools.partial(create_gist_filesystem, transport=transport))
    monkeypatch.setattr(main, 'GistClient', functools.partial(GistClient, transport=transport))


def invoke(*args: str, input: str | None = None):
    return runner.invoke(main.app, ['--token', 't', *args], input=input)


def test_ls(gist_id: str) -> None:
    result = invoke('--gist-id', gist_id, 'ls')

    assert result.exit_code == 0, result.output
    assert 'readme.md' in result.output
    assert 'docs/guide.txt' in result.output


def test_ls_prefix(gist_id: str) -> None:
    result = invoke('--gist-id', gist_id, 'ls', 'docs')

    assert result.exit_code == 0, result.output
    assert 'docs/guide.txt' in result.output
    assert 'readme.md' not in result.output


def test_cat(gist_id: str) -> None:
    result = invoke('--gist-id', gist_id, 'cat', 'readme.md')

    assert result.exit_code == 0, result.output
    assert result.output == '# Notes'


def test_cat_missing_file_exits_1(gist_id: str) -> None:
    result = invoke('--gist-id', gist_id, 'cat', 'absent.txt')

    assert result.exit_code == 1
    assert 'file not found in gist' in result.output


def test_put_content(gist_id: str, fake_gist: FakeGistService) -> None:
    result = invoke('--gist-id', gist_id, 'put', 'hello.txt', '--content', 'Hello, World!')

    assert result.exit_code == 0, result.output
    assert fake_gist.gists[gist_id]['files']['hello.txt'] == 'Hello, World!'


def test_put_stdin(gist_id: str, fake_gist: FakeGistService) -> None:
    result = invoke('--gist-id', gist_id, 'put', 'piped.txt', input='from stdin')

    assert result.exit_code == 0, result.output
    assert fake_gist.gists[gist_id]['files']['piped.txt'] == 'from stdin'


def test_put_auto_create_reports_new_gist(fake_gist: FakeGistService) -> None:
    result = invoke('put', 'welcome.txt', '--content', 'hi', '--auto-create')

    assert result.exit_code == 0, result.output
    (created_id,) = fake_gist.gists
    assert f'New gist ID: {created_id}' in result.output


def test_put_without_gist_id_is_a_configuration_error(fake_gist: FakeGistService) -> None:
    result = invoke('put', 'welcome.txt', '--content', 'hi')

    assert result.exit_code == 1
    assert 'gist_id' in result.output
    assert fake_gist.requests == []


def test_rm_mv_cp(gist_id: str, fake_gist: FakeGistService) -> None:
    assert invoke('--gist-id', gist_id, 'cp', 'readme.md', 'copy.md').exit_code == 0
    assert invoke('--gist-id', gist_id, 'mv', 'copy.md', 'moved.md').exit_code == 0
    assert invoke('--gist-id', gist_id, 'rm', 'readme.md').exit_code == 0

    assert set(fake_gist.gists[gist_id]['files']) == {'docs/guide.txt', 'moved.md'}


def test_stat(gist_id: str) -> None:
    result = invoke('--gist-id', gist_id, 'stat', 'docs/guide.txt')

    assert result.exit_code == 0, result.output
    assert 'Size:      8 bytes' in result.output
    assert 'text/plain' in result.output


def test_gists(fake_gist: FakeGistService) -> None:
    fake_gist.add_gist({'a.txt': 'A'}, description='first', public=True)

    result = invoke('gists')

    assert result.exit_code == 0, result.output
    assert 'public' in result.output
    assert 'first' in result.output


def test_check(gist_id: str) -> None:
    ok = invoke('check', gist_id)
    missing = invoke('check', 'missing')

    assert ok.exit_code == 0, ok.output
    assert 'octocat' in ok.output
    assert missing.exit_code == 1


def test_describe(gist_id: str, fake_gist: FakeGistService) -> None:
    result = invoke('describe', gist_id, 'Renamed')

    assert result.exit_code == 0, result.output
    assert fake_gist.gists[gist_id]['description'] == 'Renamed'


def test_download(gist_id: str, tmp_path) -> None:
    result = invoke('download', gist_id, str(tmp_path / 'out'))

    assert result.exit_code == 0, result.output
    assert (tmp_path / 'out' / 'readme.md').read_text(encoding='utf-8') == '# Notes'


def test_delete_gist(gist_id: str, fake_gist: FakeGistService) -> None:
    result = invoke('delete-gist', gist_id, '--yes')

    assert result.exit_code == 0, result.output
    assert gist_id not in fake_gist.gists


def test_missing_token(gist_id: str) -> None:
    result = runner.invoke(main.app, ['--gist-id', gist_id, 'ls'])

    assert result.exit_code == 1
    assert 'GitHub token required' in result.output


def test_filesystem_helper_builds_gist_filesystem(gist_id: str) -> None:
    state = main.CLIState(token='t', gist_id=gist_id, logger=main.CLILogger(verbose=False))

    filesystem = main._filesystem(state)

    assert isinstance(filesystem, GistFilesystem)
    assert filesystem.gist_id == gist_id
    assert filesystem.description == 'Files uploaded via gist-storage'
