"""Aggregate repository, commit and pull request data into organization stats."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from .analyzer import analyze_repository
from .github.client import GitHubClient
from .models import (
    CodeStats,
    Commit,
    Member,
    OrganizationStats,
    PullRequest,
    RecentActivity,
    Repository,
    UserStats,
)
from .progress import ProgressChannel

logger = logging.getLogger(__name__)

TOP_LANGUAGES = 10
RECENT_ACTIVITY_LIMIT = 50
COMMITS_PER_REPO = 10
PULL_REQUESTS_PER_REPO = 5

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _parse_timestamp(value: str | None) -> datetime:
    if not value:
        return _EPOCH
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return _EPOCH
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _touch(stats: UserStats, repository: str, timestamp: str) -> None:
    if repository and repository not in stats.repositories:
        stats.repositories.append(repository)
    if _parse_timestamp(timestamp) > _parse_timestamp(stats.last_activity):
        stats.last_activity = timestamp


def compute_user_stats(
    members: list[Member],
    commits: list[Commit],
    pull_requests: list[PullRequest],
) -> list[UserStats]:
    """Attribute commits and pull requests to organization members.

    Commits are matched on the member's profile email, pull requests on the
    author login. Activity that matches no member is not counted for anyone.
    Every member gets an entry, in roster order.
    """
    by_login = {m.login: UserStats(member=m) for m in members}
    by_email: dict[str, UserStats] = {}
    for m in members:
        if m.email and m.email not in by_email:
            by_email[m.email] = by_login[m.login]

    for commit in commits:
        stats = by_email.get(commit.author.email) if commit.author.email else None
        if stats is None:
            continue
        stats.commits += 1
        _touch(stats, commit.repository, commit.author.date)

    for pr in pull_requests:
        stats = by_login.get(pr.author)
        if stats is None:
            continue
        stats.pull_requests += 1
        stats.lines_added += pr.additions
        stats.lines_deleted += pr.deletions
        _touch(stats, pr.repository, pr.created_at)

    return list(by_login.values())


def compute_top_languages(code_stats: list[CodeStats], limit: int = TOP_LANGUAGES) -> dict[str, int]:
    totals: dict[str, int] = {}
    for stats in code_stats:
        for language, entry in stats.language_breakdown.items():
            totals[language] = totals.get(language, 0) + entry.lines
    ranked = sorted(totals.items(), key=lambda item: item[1], reverse=True)
    return dict(ranked[:limit])


def compute_organization_stats(
    organization: str,
    repositories: list[Repository],
    members: list[Member],
    user_stats: list[UserStats],
    code_stats: list[CodeStats],
    commits: list[Commit],
    pull_requests: list[PullRequest],
) -> OrganizationStats:
    recent_commits = sorted(commits, key=lambda c: _parse_timestamp(c.author.date), reverse=True)
    recent_prs = sorted(pull_requests, key=lambda pr: _parse_timestamp(pr.created_at), reverse=True)

    return OrganizationStats(
        organization=organization,
        total_repositories=len(repositories),
        total_members=len(members),
        total_commits=sum(u.commits for u in user_stats),
        total_pull_requests=sum(u.pull_requests for u in user_stats),
        total_lines_of_code=sum(s.total_lines for s in code_stats),
        top_languages=compute_top_languages(code_stats),
        repositories=repositories,
        members=members,
        user_stats=user_stats,
        code_stats=code_stats,
        recent_activity=RecentActivity(
            commits=recent_commits[:RECENT_ACTIVITY_LIMIT],
            pull_requests=recent_prs[:RECENT_ACTIVITY_LIMIT],
        ),
    )


async def perform_full_analysis(
    client: GitHubClient,
    progress: ProgressChannel | None = None,
) -> OrganizationStats:
    """Run the complete organization analysis.

    The organization lookup happens first; if it fails the error propagates
    before any repository is touched. Failures inside a single repository are
    logged and that repository is skipped.
    """

    def report(stage: str, message: str, pct: float, repository: str | None = None) -> None:
        if progress:
            progress.emit(stage, message, pct, repository)

    report("fetching", "Starting organization analysis...", 0)
    report("fetching", "Fetching organization data...", 10)
    org = await client.get_organization()

    report("fetching", "Fetching repositories...", 25)
    repositories = await client.list_repositories()
    members = await client.list_members()
    logger.info(
        "Organization %s: %d repositories, %d members",
        org.get("login", client.organization), len(repositories), len(members),
    )

    report("analyzing", "Analyzing code statistics...", 40)
    code_stats: list[CodeStats] = []
    commits: list[Commit] = []
    pull_requests: list[PullRequest] = []

    for repo in repositories:
        try:
            code_stats.append(await analyze_repository(client, repo, progress))
            repo_commits = await client.list_commits(repo.name, repo.default_branch)
            repo_prs = await client.list_pull_requests(repo.name)
        except Exception as e:
            logger.warning("Error analyzing repository %s: %s", repo.name, e)
            continue
        commits.extend(repo_commits[:COMMITS_PER_REPO])
        pull_requests.extend(repo_prs[:PULL_REQUESTS_PER_REPO])

    report("analyzing", "Processing commits and pull requests...", 60)
    report("analyzing", "Computing user statistics...", 80)
    user_stats = compute_user_stats(members, commits, pull_requests)

    report("analyzing", "Finalizing analysis...", 95)
    stats = compute_organization_stats(
        org.get("login", client.organization),
        repositories,
        members,
        user_stats,
        code_stats,
        commits,
        pull_requests,
    )
    report("complete", "Analysis complete!", 100)
    return stats
