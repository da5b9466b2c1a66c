"""Command-line interface for org-stats."""

from __future__ import annotations

import asyncio
import logging

import click
import httpx
from rich.console import Console
from rich.logging import RichHandler

from . import __version__
from .config import ConfigError
from .github.client import RemoteError
from .orchestrator import rate_limit, run, validate
from .renderer import render_rate_limit

_token_option = click.option(
    "--token",
    envvar="GITHUB_TOKEN",
    required=True,
    help="GitHub personal access token (or set GITHUB_TOKEN).",
)


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )
    # httpx logs every request at INFO.
    logging.getLogger("httpx").setLevel(logging.WARNING)


@click.group()
@click.version_option(version=__version__, prog_name="org-stats")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def main(verbose: bool) -> None:
    """Code and contributor statistics for a GitHub organization."""
    _setup_logging(verbose)


@main.command()
@click.argument("org")
@_token_option
@click.option(
    "--format", "output_format",
    type=click.Choice(["table", "json", "csv"]),
    default="table",
    show_default=True,
    help="Output format.",
)
@click.option("--top", "top_n", type=int, default=10, show_default=True, help="Number of top contributors to show.")
@click.option("--output", "-o", "output_file", default=None, help="Write output to a file instead of stdout.")
@click.option("--no-progress", is_flag=True, help="Hide the progress bar.")
def analyze(org: str, token: str, output_format: str, top_n: int, output_file: str | None, no_progress: bool) -> None:
    """Analyze repositories, members and activity of ORG."""
    try:
        asyncio.run(run(
            org=org,
            token=token,
            output_format=output_format,
            top_n=top_n,
            output_file=output_file,
            show_progress=not no_progress,
        ))
    except (ConfigError, RemoteError, httpx.HTTPError) as e:
        raise click.ClickException(f"Analysis failed: {e}") from e


@main.command("validate")
@click.argument("org")
@_token_option
def validate_command(org: str, token: str) -> None:
    """Check that the token works and ORG is reachable."""
    try:
        valid = asyncio.run(validate(org, token))
    except (ConfigError, RemoteError, httpx.HTTPError) as e:
        raise click.ClickException(f"Validation failed: {e}") from e
    if not valid:
        raise click.ClickException("Invalid GitHub token")
    click.echo(f"Token is valid and organization {org} is accessible.")


@main.command("rate-limit")
@_token_option
def rate_limit_command(token: str) -> None:
    """Show the remaining GitHub API quota."""
    try:
        status = asyncio.run(rate_limit(token))
    except ConfigError as e:
        raise click.ClickException(str(e)) from e
    render_rate_limit(status)
