#!/usr/bin/env python3
"""
Command-line interface for gist-storage.

Filesystem commands (ls, cat, put, rm, mv, cp, stat) go through the gist
filesystem adapter; gist commands (gists, describe, check, download,
delete-gist) call the API client directly.
"""

from __future__ import annotations

import os
import sys
import traceback
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path

import typer

from gist_storage.cli.logger import CLILogger
from gist_storage.client import GistClient
from gist_storage.config import settings
from gist_storage.drivers import create_gist_filesystem
from gist_storage.exceptions import GistStorageError
from gist_storage.storage import GistFilesystem

app = typer.Typer(
    name='gist-storage',
    help='Store and manage files in a GitHub Gist',
    add_completion=False,
)


@dataclass
class CLIState:
    token: str | None
    gist_id: str | None
    logger: CLILogger


@app.callback()
def main(
    ctx: typer.Context,
    token: str | None = typer.Option(None, '--token', help='GitHub token (or use GIST_TOKEN / GITHUB_TOKEN env)'),
    gist_id: str | None = typer.Option(None, '--gist-id', help='Gist to operate on (or use GIST_ID env)'),
    verbose: bool = typer.Option(False, '--verbose', '-v', help='Verbose output'),
) -> None:
    """Store and manage files in a GitHub Gist."""
    ctx.obj = CLIState(
        token=token or settings.TOKEN or os.environ.get('GITHUB_TOKEN'),
        gist_id=gist_id or settings.ID,
        logger=CLILogger(verbose=verbose),
    )


# ==============================================================================
# Helpers
# ==============================================================================


@contextmanager
def _errors(state: CLIState) -> Iterator[None]:
    """Print expected errors in red and exit 1; verbose mode adds the traceback."""
    try:
        yield
    except (GistStorageError, FileNotFoundError) as e:
        typer.secho(f'Error: {e}', fg=typer.colors.RED, err=True)
        if state.logger.verbose:
            traceback.print_exc()
        raise typer.Exit(1)


def _require_token(state: CLIState) -> str:
    if not state.token:
        typer.secho('Error: GitHub token required.', fg=typer.colors.RED, err=True)
        typer.echo('Provide via --token or set GIST_TOKEN (or GITHUB_TOKEN) environment variable.', err=True)
        typer.echo(err=True)
        typer.echo('To create a token:', err=True)
        typer.echo('  1. Go to https://github.com/settings/tokens', err=True)
        typer.echo('  2. Generate new token (classic)', err=True)
        typer.echo("  3. Select 'gist' scope", err=True)
        raise typer.Exit(1)
    return state.token


def _client(state: CLIState) -> GistClient:
    return GistClient(_require_token(state), base_url=settings.API_BASE_URL, timeout=settings.TIMEOUT)


def _filesystem(state: CLIState, auto_create: bool = False) -> GistFilesystem:
    config = settings.to_disk_config()
    config.update(
        token=_require_token(state),
        gist_id=state.gist_id,
        auto_create=auto_create or config['auto_create'],
    )
    return create_gist_filesystem(config)


def _state(ctx: typer.Context) -> CLIState:
    return ctx.obj


# ==============================================================================
# Filesystem commands
# ==============================================================================


@app.command('ls')
def list_files(
    ctx: typer.Context,
    prefix: str = typer.Argument('', help="Only files under this 'directory' prefix"),
) -> None:
    """List files in the gist."""
    state = _state(ctx)
    with _errors(state):
        filesystem = _filesystem(state)
        count = 0
        for entry in filesystem.list_contents(prefix):
            typer.echo(f'{entry.file_size or 0:>10}  {entry.mime_type or "":<24}  {entry.path}')
            count += 1
        state.logger.info(f'{count} file(s) in gist {filesystem.gist_id}')


@app.command()
def cat(
    ctx: typer.Context,
    path: str = typer.Argument(..., help='File to print'),
) -> None:
    """Print a file from the gist."""
    state = _state(ctx)
    with _errors(state):
        typer.echo(_filesystem(state).read_text(path), nl=False)


@app.command()
def put(
    ctx: typer.Context,
    path: str = typer.Argument(..., help='Filename inside the gist'),
    from_file: Path | None = typer.Option(None, '--from-file', '-f', help='Read content from a local file'),
    content: str | None = typer.Option(None, '--content', '-c', help='Content (default: read stdin)'),
    auto_create: bool = typer.Option(False, '--auto-create', help='Create a new gist when no gist id is set'),
) -> None:
    """Write a file to the gist."""
    state = _state(ctx)
    if from_file is not None and content is not None:
        raise typer.BadParameter('Use either --from-file or --content, not both')

    with _errors(state):
        filesystem = _filesystem(state, auto_create=auto_create)
        if from_file is not None:
            data: bytes | str = from_file.read_bytes()
        elif content is not None:
            data = content
        else:
            data = sys.stdin.read()

        created = filesystem.gist_id is None
        filesystem.write(path, data)

    typer.secho(f'✓ Wrote {path}', fg=typer.colors.GREEN)
    if created:
        typer.echo(f'  New gist ID: {filesystem.gist_id}')
        state.logger.warning('Save the new gist ID (e.g. GIST_ID in .env); it is not stored anywhere else.')


@app.command()
def rm(
    ctx: typer.Context,
    path: str = typer.Argument(..., help='File to delete'),
) -> None:
    """Delete a file from the gist."""
    state = _state(ctx)
    with _errors(state):
        _filesystem(state).delete(path)
    typer.secho(f'✓ Deleted {path}', fg=typer.colors.GREEN)


@app.command()
def mv(
    ctx: typer.Context,
    source: str = typer.Argument(...),
    destination: str = typer.Argument(...),
) -> None:
    """Rename a file inside the gist (copy, then delete the source)."""
    state = _state(ctx)
    with _errors(state):
        _filesystem(state).move(source, destination)
    typer.secho(f'✓ Moved {source} -> {destination}', fg=typer.colors.GREEN)


@app.command()
def cp(
    ctx: typer.Context,
    source: str = typer.Argument(...),
    destination: str = typer.Argument(...),
) -> None:
    """Copy a file inside the gist."""
    state = _state(ctx)
    with _errors(state):
        _filesystem(state).copy(source, destination)
    typer.secho(f'✓ Copied {source} -> {destination}', fg=typer.colors.GREEN)


@app.command()
def stat(
    ctx: typer.Context,
    path: str = typer.Argument(..., help='File to describe'),
) -> None:
    """Show size and content type of a file."""
    state = _state(ctx)
    with _errors(state):
        filesystem = _filesystem(state)
        size = filesystem.file_size(path).file_size
        mime_type = filesystem.mime_type(path).mime_type
    typer.echo(f'Path:      {path}')
    typer.echo(f'Size:      {size} bytes')
    typer.echo(f'MIME type: {mime_type}')


# ==============================================================================
# Gist commands
# ==============================================================================


@app.command()
def gists(
    ctx: typer.Context,
    page: int = typer.Option(1, '--page', min=1),
    per_page: int = typer.Option(10, '--per-page', min=1, max=100),
) -> None:
    """List your gists."""
    state = _state(ctx)
    with _errors(state), _client(state) as client:
        for gist in client.list_gists(page=page, per_page=per_page):
            visibility = 'public' if gist.public else 'secret'
            typer.echo(f'{gist.id}  {visibility:<6}  {len(gist.files):>3} file(s)  {gist.description or ""}')


@app.command()
def describe(
    ctx: typer.Context,
    gist_id: str = typer.Argument(...),
    description: str = typer.Argument(...),
) -> None:
    """Update a gist's description."""
    state = _state(ctx)
    with _errors(state), _client(state) as client:
        gist = client.update_description(gist_id, description)
    typer.secho(f'✓ Updated description of {gist.id}', fg=typer.colors.GREEN)


@app.command()
def check(
    ctx: typer.Context,
    gist_id: str = typer.Argument(...),
) -> None:
    """Check that a gist exists and is accessible (exit 1 if not)."""
    state = _state(ctx)
    with _errors(state), _client(state) as client:
        gist = client.get_gist_if_accessible(gist_id)

    if gist is None:
        state.logger.error(f'Gist {gist_id} not found or not accessible')
        raise typer.Exit(1)

    owner = gist.owner.login if gist.owner else 'unknown'
    typer.secho(f'✓ Gist {gist.id} is accessible', fg=typer.colors.GREEN)
    typer.echo(f'  Owner:   {owner}')
    typer.echo(f'  Files:   {len(gist.files)}')
    typer.echo(f'  Updated: {gist.updated_at}')


@app.command()
def download(
    ctx: typer.Context,
    gist_id: str = typer.Argument(...),
    directory: Path = typer.Argument(..., help='Local directory (created if missing)'),
) -> None:
    """Download every file of a gist into a directory."""
    state = _state(ctx)
    with _errors(state), _client(state) as client:
        saved = client.download_to_dir(gist_id, directory)
    for path in saved:
        typer.echo(f'Downloaded: {path}')


@app.command('delete-gist')
def delete_gist(
    ctx: typer.Context,
    gist_id: str = typer.Argument(...),
    yes: bool = typer.Option(False, '--yes', '-y', help='Skip confirmation'),
) -> None:
    """Delete an entire gist."""
    state = _state(ctx)
    if not yes:
        typer.confirm(f'Delete gist {gist_id} and all of its files?', abort=True)
    with _errors(state), _client(state) as client:
        client.delete_gist(gist_id)
    typer.secho(f'✓ Deleted gist {gist_id}', fg=typer.colors.GREEN)


if __name__ == '__main__':
    app()
