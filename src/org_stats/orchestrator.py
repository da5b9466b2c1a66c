"""Wire the client, the analysis, progress display and rendering together."""

from __future__ import annotations

import asyncio
import logging

from rich.console import Console
from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn

from .aggregator import perform_full_analysis
from .config import AnalysisConfig, require_token
from .github.client import GitHubClient
from .models import OrganizationStats, RateLimitStatus
from .progress import ProgressChannel
from .renderer import render_csv, render_json, render_report
from .service import validate_configuration

logger = logging.getLogger(__name__)


async def _show_progress(channel: ProgressChannel, console: Console) -> None:
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TextColumn("{task.percentage:>3.0f}%"),
        console=console,
        transient=True,
    ) as bar:
        overall = bar.add_task("Starting...", total=100)
        async for event in channel:
            if event.repository:
                # Per-file events only refresh the label.
                bar.update(overall, description=f"[cyan]{event.repository}[/cyan] {event.message}")
            else:
                bar.update(overall, description=event.message, completed=event.progress)


async def analyze(config: AnalysisConfig, show_progress: bool = True) -> OrganizationStats:
    channel = ProgressChannel()
    console = Console(stderr=True)
    consumer = None
    if show_progress:
        consumer = asyncio.create_task(_show_progress(channel, console))

    try:
        async with GitHubClient(config.token, config.organization, base_url=config.base_url) as client:
            return await perform_full_analysis(client, channel if show_progress else None)
    finally:
        channel.close()
        if consumer is not None:
            await consumer


async def run(
    org: str,
    token: str,
    output_format: str = "table",
    top_n: int = 10,
    output_file: str | None = None,
    show_progress: bool = True,
) -> None:
    config = AnalysisConfig(token=token, organization=org).validate()
    stats = await analyze(config, show_progress=show_progress)

    if output_format == "json":
        render_json(stats, output_file=output_file)
    elif output_format == "csv":
        render_csv(stats, output_file=output_file)
    else:
        render_report(stats, top_n=top_n, output_file=output_file)


async def validate(org: str, token: str) -> bool:
    config = AnalysisConfig(token=token, organization=org).validate()
    async with GitHubClient(config.token, config.organization, base_url=config.base_url) as client:
        return await validate_configuration(client)


async def rate_limit(token: str) -> RateLimitStatus | None:
    token = require_token(token)
    async with GitHubClient(token, "") as client:
        return await client.get_rate_limit()
