"""
CLI logger - console output for command-line usage.

Library modules log through the standard logging module; the CLI routes those
records to stderr and prints its own progress messages through CLILogger.
"""

from __future__ import annotations

import logging

import typer


class CLILogger:
    """
    Logger for CLI commands.

    Outputs messages to stdout/stderr with optional verbose mode.
    """

    def __init__(self, verbose: bool = False) -> None:
        """
        Initialize CLI logger.

        Args:
            verbose: If True, show info messages and library DEBUG logs.
                If False, only warnings/errors.
        """
        self.verbose = verbose
        logging.basicConfig(
            level=logging.DEBUG if verbose else logging.WARNING,
            format='[%(levelname)s] %(name)s: %(message)s',
        )
        # httpx logs every request at INFO; our client already logs them at DEBUG
        logging.getLogger('httpx').setLevel(logging.WARNING)

    def info(self, message: str) -> None:
        """Log info message (only if verbose)."""
        if self.verbose:
            typer.echo(f'[INFO] {message}', err=True)

    def warning(self, message: str) -> None:
        """Log warning message."""
        typer.secho(f'[WARNING] {message}', fg=typer.colors.YELLOW, err=True)

    def error(self, message: str) -> None:
        """Log error message."""
        typer.secho(f'[ERROR] {message}', fg=typer.colors.RED, err=True)
