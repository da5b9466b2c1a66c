"""Data models for org-stats."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class Repository:
    id: int
    name: str
    full_name: str
    default_branch: str = "main"
    description: str | None = None
    private: bool = False
    fork: bool = False
    archived: bool = False
    visibility: str = "public"
    html_url: str = ""
    language: str | None = None
    size: int = 0
    stargazers_count: int = 0
    watchers_count: int = 0
    forks_count: int = 0
    open_issues_count: int = 0
    created_at: str = ""
    updated_at: str = ""
    pushed_at: str = ""

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Repository:
        return cls(
            id=data["id"],
            name=data["name"],
            full_name=data["full_name"],
            default_branch=data.get("default_branch") or "main",
            description=data.get("description"),
            private=bool(data.get("private", False)),
            fork=bool(data.get("fork", False)),
            archived=bool(data.get("archived", False)),
            visibility=data.get("visibility") or ("private" if data.get("private") else "public"),
            html_url=data.get("html_url", ""),
            language=data.get("language"),
            size=data.get("size") or 0,
            stargazers_count=data.get("stargazers_count") or 0,
            watchers_count=data.get("watchers_count") or 0,
            forks_count=data.get("forks_count") or 0,
            open_issues_count=data.get("open_issues_count") or 0,
            created_at=data.get("created_at") or "",
            updated_at=data.get("updated_at") or "",
            pushed_at=data.get("pushed_at") or "",
        )


@dataclass
class Member:
    id: int
    login: str
    name: str | None = None
    email: str | None = None
    avatar_url: str = ""
    html_url: str = ""
    company: str | None = None
    location: str | None = None
    bio: str | None = None
    public_repos: int = 0
    followers: int = 0
    following: int = 0

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Member:
        """Build a member from either a listing entry or a full user profile.

        Listing entries carry no profile fields, so everything except the
        identity falls back to its default.
        """
        return cls(
            id=data["id"],
            login=data["login"],
            name=data.get("name"),
            email=data.get("email") or None,
            avatar_url=data.get("avatar_url", ""),
            html_url=data.get("html_url", ""),
            company=data.get("company"),
            location=data.get("location"),
            bio=data.get("bio"),
            public_repos=data.get("public_repos") or 0,
            followers=data.get("followers") or 0,
            following=data.get("following") or 0,
        )


@dataclass
class CommitPerson:
    name: str
    email: str
    date: str

    @classmethod
    def from_api(cls, data: dict[str, Any] | None) -> CommitPerson:
        data = data or {}
        return cls(
            name=data.get("name") or "Unknown",
            email=data.get("email") or "",
            date=data.get("date") or "",
        )


@dataclass
class Commit:
    sha: str
    author: CommitPerson
    committer: CommitPerson
    message: str
    url: str
    repository: str = ""

    @classmethod
    def from_api(cls, data: dict[str, Any], repository: str = "") -> Commit:
        detail = data.get("commit") or {}
        return cls(
            sha=data["sha"],
            author=CommitPerson.from_api(detail.get("author")),
            committer=CommitPerson.from_api(detail.get("committer")),
            message=detail.get("message", ""),
            url=data.get("html_url", ""),
            repository=repository,
        )


@dataclass
class PullRequest:
    id: int
    number: int
    title: str
    state: str
    author: str
    created_at: str
    updated_at: str = ""
    closed_at: str | None = None
    merged_at: str | None = None
    url: str = ""
    additions: int = 0
    deletions: int = 0
    changed_files: int = 0
    repository: str = ""

    @classmethod
    def from_api(cls, data: dict[str, Any], repository: str = "") -> PullRequest:
        merged_at = data.get("merged_at")
        return cls(
            id=data["id"],
            number=data["number"],
            title=data.get("title", ""),
            # A merged PR is reported as "closed" by the API.
            state="merged" if merged_at else data.get("state", "open"),
            author=(data.get("user") or {}).get("login", ""),
            created_at=data.get("created_at") or "",
            updated_at=data.get("updated_at") or "",
            closed_at=data.get("closed_at"),
            merged_at=merged_at,
            url=data.get("html_url", ""),
            additions=data.get("additions") or 0,
            deletions=data.get("deletions") or 0,
            changed_files=data.get("changed_files") or 0,
            repository=repository,
        )


@dataclass
class LanguageStats:
    lines: int = 0
    files: int = 0
    percentage: float = 0.0


@dataclass
class CodeStats:
    repository: str
    branch: str
    total_lines: int = 0
    code_lines: int = 0
    comment_lines: int = 0
    blank_lines: int = 0
    file_count: int = 0
    language_breakdown: dict[str, LanguageStats] = field(default_factory=dict)


@dataclass
class UserStats:
    member: Member
    commits: int = 0
    pull_requests: int = 0
    lines_added: int = 0
    lines_deleted: int = 0
    repositories: list[str] = field(default_factory=list)
    last_activity: str = ""


@dataclass
class RecentActivity:
    commits: list[Commit] = field(default_factory=list)
    pull_requests: list[PullRequest] = field(default_factory=list)


@dataclass
class OrganizationStats:
    organization: str
    total_repositories: int
    total_members: int
    total_commits: int
    total_pull_requests: int
    total_lines_of_code: int
    top_languages: dict[str, int] = field(default_factory=dict)
    repositories: list[Repository] = field(default_factory=list)
    members: list[Member] = field(default_factory=list)
    user_stats: list[UserStats] = field(default_factory=list)
    code_stats: list[CodeStats] = field(default_factory=list)
    recent_activity: RecentActivity = field(default_factory=RecentActivity)


@dataclass
class RateLimitStatus:
    limit: int
    remaining: int
    used: int
    reset: int


@dataclass
class ProgressEvent:
    stage: str
    message: str
    progress: float
    repository: str | None = None
