"""Async client for the GitHub REST API."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, AsyncIterator

import httpx

from .. import __version__
from ..models import Commit, Member, PullRequest, RateLimitStatus, Repository
from .rate_limit import RateLimitMonitor

logger = logging.getLogger(__name__)

API_URL = "https://api.github.com"
PAGE_SIZE = 100
COMMIT_PAGE_LIMIT = 10
PULL_REQUEST_PAGE_LIMIT = 5
FALLBACK_BRANCHES = ["main", "master"]


class RemoteError(Exception):
    """A GitHub API request answered with a non-success status."""

    def __init__(self, status: int, reason: str, url: str = "") -> None:
        super().__init__(f"GitHub API error: {status} {reason}")
        self.status = status
        self.reason = reason
        self.url = url


class GitHubClient:
    """GitHub API client scoped to one organization.

    The client owns an ``httpx.AsyncClient`` and is meant to live for a single
    analysis run::

        async with GitHubClient(token, "my-org") as client:
            org = await client.get_organization()
    """

    def __init__(
        self,
        token: str,
        organization: str,
        base_url: str = API_URL,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.organization = organization
        self.rate_limit = RateLimitMonitor()
        self._http = httpx.AsyncClient(
            base_url=base_url,
            headers={
                "Authorization": f"Bearer {token}",
                "Accept": "application/vnd.github+json",
                "User-Agent": f"org-stats/{__version__}",
            },
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self) -> GitHubClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def close(self) -> None:
        await self._http.aclose()

    async def _request(self, path: str, params: dict[str, Any] | None = None) -> Any:
        response = await self._http.get(path, params=params)
        self.rate_limit.update(response)
        if response.is_error:
            raise RemoteError(response.status_code, response.reason_phrase, str(response.url))
        try:
            return response.json()
        except ValueError as e:
            raise RemoteError(response.status_code, f"Invalid JSON body: {e}", str(response.url)) from e

    async def _iter_pages(
        self,
        path: str,
        params: dict[str, Any] | None = None,
        max_pages: int | None = None,
    ) -> AsyncIterator[list[dict[str, Any]]]:
        """Yield successive pages of a list endpoint.

        A full page means another one may follow; the first short page ends
        the iteration. A final page of exactly ``PAGE_SIZE`` items therefore
        costs one extra, empty request.
        """
        page = 1
        while max_pages is None or page <= max_pages:
            query = dict(params or {})
            query.update(per_page=PAGE_SIZE, page=page)
            data = await self._request(path, params=query)
            yield data
            if len(data) < PAGE_SIZE:
                return
            page += 1

    async def _paginate(
        self,
        path: str,
        params: dict[str, Any] | None = None,
        max_pages: int | None = None,
    ) -> list[dict[str, Any]]:
        items: list[dict[str, Any]] = []
        async for data in self._iter_pages(path, params, max_pages=max_pages):
            items.extend(data)
        return items

    # -- critical endpoints: errors propagate to the caller --

    async def get_organization(self) -> dict[str, Any]:
        try:
            return await self._request(f"/orgs/{self.organization}")
        except (RemoteError, httpx.HTTPError) as e:
            logger.error("Error fetching organization %s: %s", self.organization, e)
            raise

    async def validate_token(self) -> bool:
        try:
            await self._request("/user")
        except RemoteError as e:
            logger.error("Token validation failed: %s", e)
            return False
        return True

    async def list_repositories(self) -> list[Repository]:
        data = await self._paginate(
            f"/orgs/{self.organization}/repos",
            params={"sort": "updated", "direction": "desc"},
        )
        return [Repository.from_api(r) for r in data]

    async def list_members(self) -> list[Member]:
        """List organization members with their full profiles.

        Profiles of one page are fetched concurrently and joined before the
        next page is requested.
        """
        members: list[Member] = []
        async for page in self._iter_pages(f"/orgs/{self.organization}/members"):
            detailed = await asyncio.gather(*(self._member_detail(m) for m in page))
            members.extend(Member.from_api(d) for d in detailed)
        return members

    async def _member_detail(self, member: dict[str, Any]) -> dict[str, Any]:
        try:
            return await self._request(f"/users/{member['login']}")
        except (RemoteError, httpx.HTTPError) as e:
            logger.warning("Error fetching user details for %s: %s", member["login"], e)
            return member

    # -- per-repository endpoints: errors are logged and defaulted --

    async def list_commits(self, repo: str, branch: str = "main") -> list[Commit]:
        try:
            data = await self._paginate(
                f"/repos/{self.organization}/{repo}/commits",
                params={"sha": branch},
                max_pages=COMMIT_PAGE_LIMIT,
            )
        except (RemoteError, httpx.HTTPError) as e:
            logger.warning("Error fetching commits for %s: %s", repo, e)
            return []
        return [Commit.from_api(c, repository=repo) for c in data]

    async def list_pull_requests(self, repo: str) -> list[PullRequest]:
        try:
            data = await self._paginate(
                f"/repos/{self.organization}/{repo}/pulls",
                params={"state": "all", "sort": "updated", "direction": "desc"},
                max_pages=PULL_REQUEST_PAGE_LIMIT,
            )
        except (RemoteError, httpx.HTTPError) as e:
            logger.warning("Error fetching pull requests for %s: %s", repo, e)
            return []
        return [PullRequest.from_api(pr, repository=repo) for pr in data]

    async def get_languages(self, repo: str) -> dict[str, int]:
        try:
            return await self._request(f"/repos/{self.organization}/{repo}/languages")
        except (RemoteError, httpx.HTTPError) as e:
            logger.warning("Error fetching languages for %s: %s", repo, e)
            return {}

    async def list_branches(self, repo: str) -> list[str]:
        try:
            data = await self._request(
                f"/repos/{self.organization}/{repo}/branches",
                params={"per_page": PAGE_SIZE},
            )
        except (RemoteError, httpx.HTTPError) as e:
            logger.warning("Error fetching branches for %s: %s", repo, e)
            return list(FALLBACK_BRANCHES)
        return [b["name"] for b in data]

    # -- repository contents --

    async def get_tree(self, full_name: str, branch: str) -> list[dict[str, Any]]:
        data = await self._request(
            f"/repos/{full_name}/git/trees/{branch}", params={"recursive": "1"}
        )
        if data.get("truncated"):
            logger.debug("Tree of %s@%s was truncated by the API", full_name, branch)
        return data.get("tree", [])

    async def get_blob(self, url: str) -> dict[str, Any]:
        return await self._request(url)

    async def get_rate_limit(self) -> RateLimitStatus | None:
        try:
            data = await self._request("/rate_limit")
        except (RemoteError, httpx.HTTPError) as e:
            logger.warning("Error fetching rate limit: %s", e)
            return None
        core = data.get("resources", {}).get("core") or data.get("rate", {})
        return RateLimitStatus(
            limit=core.get("limit", 0),
            remaining=core.get("remaining", 0),
            used=core.get("used", 0),
            reset=core.get("reset", 0),
        )
