"""Rich-based terminal dashboard with JSON/CSV support."""

from __future__ import annotations

import csv
import io
import json
from dataclasses import asdict
from datetime import datetime, timezone

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import OrganizationStats, RateLimitStatus

RECENT_ROWS = 8


def _format_number(n: int) -> str:
    return f"{n:,}"


def _make_bar(percentage: float, width: int = 20) -> str:
    filled = round(percentage / 100 * width)
    return "█" * filled + "░" * (width - filled)


def _short_date(timestamp: str | None) -> str:
    return timestamp[:10] if timestamp else "-"


def _write_to_file(content: str, output_file: str) -> None:
    """Write content to a file and print confirmation."""
    with open(output_file, "w", encoding="utf-8") as f:
        f.write(content)
    Console().print(f"Saved to {output_file}")


def render_report(
    stats: OrganizationStats,
    top_n: int = 10,
    output_file: str | None = None,
) -> None:
    """Render OrganizationStats to the terminal using rich."""
    if output_file:
        string_io = io.StringIO()
        console = Console(file=string_io, force_terminal=False, width=120)
    else:
        console = Console()

    console.print(Panel(
        Text(f"org-stats: {stats.organization}", justify="center"),
        style="bold cyan",
    ))
    console.print()

    # Summary
    console.print("[bold]Summary[/bold]")
    summary = Table(show_header=False, box=None, padding=(0, 2))
    summary.add_column("label", style="dim")
    summary.add_column("value", style="bold")
    summary.add_row("Repositories", _format_number(stats.total_repositories))
    summary.add_row("Members", _format_number(stats.total_members))
    summary.add_row("Commits", _format_number(stats.total_commits))
    summary.add_row("Pull Requests", _format_number(stats.total_pull_requests))
    summary.add_row("Lines of Code", _format_number(stats.total_lines_of_code))
    console.print(summary)
    console.print()

    # Language distribution
    if stats.top_languages:
        console.print("[bold]Top Languages[/bold]")
        lang_table = Table(show_header=True, header_style="bold")
        lang_table.add_column("Language")
        lang_table.add_column("Bar")
        lang_table.add_column("Percentage", justify="right")
        lang_table.add_column("Lines", justify="right")

        total = stats.total_lines_of_code
        for language, lines in stats.top_languages.items():
            percentage = lines / total * 100 if total else 0.0
            lang_table.add_row(
                language,
                _make_bar(percentage),
                f"{percentage:.1f}%",
                _format_number(lines),
            )
        console.print(lang_table)
        console.print()

    # Top contributors
    contributors = sorted(stats.user_stats, key=lambda u: u.commits, reverse=True)[:top_n]
    if contributors:
        console.print(f"[bold]Top Contributors (top {top_n})[/bold]")
        contrib_table = Table(show_header=True, header_style="bold")
        contrib_table.add_column("#", justify="right")
        contrib_table.add_column("Login")
        contrib_table.add_column("Commits ▼", justify="right")
        contrib_table.add_column("PRs", justify="right")
        contrib_table.add_column("Added", justify="right")
        contrib_table.add_column("Deleted", justify="right")
        contrib_table.add_column("Last Activity")

        for i, u in enumerate(contributors, 1):
            contrib_table.add_row(
                str(i),
                u.member.login,
                _format_number(u.commits),
                _format_number(u.pull_requests),
                _format_number(u.lines_added),
                _format_number(u.lines_deleted),
                _short_date(u.last_activity),
            )
        console.print(contrib_table)
        console.print()

    # Per-repository code stats
    if stats.code_stats:
        console.print("[bold]Repository Code[/bold]")
        repo_table = Table(show_header=True, header_style="bold")
        repo_table.add_column("Repo")
        repo_table.add_column("Files", justify="right")
        repo_table.add_column("Lines", justify="right")
        repo_table.add_column("Code", justify="right")
        repo_table.add_column("Comments", justify="right")
        repo_table.add_column("Blank", justify="right")
        repo_table.add_column("Top Language")

        for s in sorted(stats.code_stats, key=lambda s: s.total_lines, reverse=True):
            top_lang = max(
                s.language_breakdown.items(), key=lambda item: item[1].lines, default=("-", None)
            )[0]
            repo_table.add_row(
                s.repository,
                _format_number(s.file_count),
                _format_number(s.total_lines),
                _format_number(s.code_lines),
                _format_number(s.comment_lines),
                _format_number(s.blank_lines),
                top_lang,
            )
        console.print(repo_table)
        console.print()

    # Recent activity
    commits = stats.recent_activity.commits[:RECENT_ROWS]
    if commits:
        console.print("[bold]Recent Commits[/bold]")
        commit_table = Table(show_header=True, header_style="bold")
        commit_table.add_column("Date")
        commit_table.add_column("Repo")
        commit_table.add_column("Author")
        commit_table.add_column("Message", overflow="ellipsis", no_wrap=True, max_width=60)
        for c in commits:
            commit_table.add_row(
                _short_date(c.author.date),
                c.repository,
                c.author.name,
                c.message.splitlines()[0] if c.message else "",
            )
        console.print(commit_table)
        console.print()

    pull_requests = stats.recent_activity.pull_requests[:RECENT_ROWS]
    if pull_requests:
        console.print("[bold]Recent Pull Requests[/bold]")
        pr_table = Table(show_header=True, header_style="bold")
        pr_table.add_column("Date")
        pr_table.add_column("Repo")
        pr_table.add_column("#", justify="right")
        pr_table.add_column("Author")
        pr_table.add_column("State")
        pr_table.add_column("Title", overflow="ellipsis", no_wrap=True, max_width=60)
        for pr in pull_requests:
            pr_table.add_row(
                _short_date(pr.created_at),
                pr.repository,
                str(pr.number),
                pr.author,
                pr.state,
                pr.title,
            )
        console.print(pr_table)
        console.print()

    if output_file:
        _write_to_file(string_io.getvalue(), output_file)


def render_json(stats: OrganizationStats, output_file: str | None = None) -> None:
    """Render OrganizationStats as JSON."""
    content = json.dumps(asdict(stats), indent=2, ensure_ascii=False)
    if output_file:
        _write_to_file(content, output_file)
    else:
        print(content)


def render_csv(stats: OrganizationStats, output_file: str | None = None) -> None:
    """Render per-user statistics as CSV."""
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(["login", "commits", "pull_requests", "lines_added", "lines_deleted", "last_activity"])
    for u in stats.user_stats:
        writer.writerow([
            u.member.login, u.commits, u.pull_requests, u.lines_added, u.lines_deleted, u.last_activity,
        ])
    content = output.getvalue()
    if output_file:
        _write_to_file(content, output_file)
    else:
        print(content, end="")


def render_rate_limit(status: RateLimitStatus | None) -> None:
    console = Console()
    if status is None:
        console.print("[bold yellow]Rate limit information unavailable[/bold yellow]")
        return
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("label", style="dim")
    table.add_column("value", style="bold")
    table.add_row("Limit", _format_number(status.limit))
    table.add_row("Remaining", _format_number(status.remaining))
    table.add_row("Used", _format_number(status.used))
    reset_at = datetime.fromtimestamp(status.reset, tz=timezone.utc)
    table.add_row("Resets at", reset_at.strftime("%Y-%m-%d %H:%M:%S UTC"))
    console.print(table)
